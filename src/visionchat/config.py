"""Central configuration for paths and constants."""

import os
from pathlib import Path

from .models import ModelInfo

# Data directory — override with VISIONCHAT_DATA_DIR env var
DATA_DIR = Path(
    os.environ.get("VISIONCHAT_DATA_DIR", str(Path.home() / ".visionchat"))
)

# Credential database
SQLITE_PATH = DATA_DIR / "visionchat.db"
API_KEY_STORAGE_KEY = "openai_api_key"

# Remote API
API_BASE_URL = os.environ.get("VISIONCHAT_API_BASE", "https://api.openai.com")
REQUEST_TIMEOUT = float(os.environ.get("VISIONCHAT_TIMEOUT", "120"))
DEFAULT_MAX_TOKENS = 4096

# Conversations
NEW_CHAT_TITLE = "New Chat"
TITLE_MAX_CHARS = 30
IMAGE_TITLE = "Image"
IMAGE_DETAIL = "high"

# Optional system prompt sent ahead of every user turn
SYSTEM_PROMPT = os.environ.get("VISIONCHAT_SYSTEM_PROMPT") or None

# Vision-capable models offered in the model picker
MODELS = [
    ModelInfo(id="gpt-4o-mini", name="GPT-4o Mini", description="Fast & affordable (Vision)"),
    ModelInfo(id="gpt-4o", name="GPT-4o", description="Most capable (Vision)"),
    ModelInfo(id="o1-mini", name="O1 Mini", description="Reasoning model (Vision)"),
    ModelInfo(id="o1-preview", name="O1 Preview", description="Advanced reasoning (Vision)"),
]
DEFAULT_MODEL = "gpt-4o-mini"
