"""CLI interface for visionchat."""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .config import API_BASE_URL, DATA_DIR, DEFAULT_MODEL, MODELS, SQLITE_PATH


def _credentials():
    from .credentials import CredentialStore

    return CredentialStore(SQLITE_PATH)


def _require_api_key() -> str:
    store = _credentials()
    api_key = store.get_api_key()
    store.close()
    if not api_key:
        raise click.ClickException(
            "No API key stored. Log in first:\n  visionchat login"
        )
    return api_key


def _check_model(model: str | None):
    if model and model not in {m.id for m in MODELS}:
        click.echo(f"Warning: '{model}' is not in the model list.", err=True)


def _load_images(paths) -> list[str]:
    from .session import image_data_url

    return [image_data_url(p) for p in paths]


@click.group()
@click.version_option(version=__version__, prog_name="visionchat")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool):
    """visionchat — Chat with OpenAI vision models from your terminal.

    Log in with your OpenAI API key, then ask one-off questions or start an
    interactive chat. Images can be attached to any message.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command()
@click.option("--key", help="API key (prompted for if omitted)")
def login(key: str | None):
    """Validate an OpenAI API key and store it locally."""
    from .client import validate_api_key

    if not key:
        key = click.prompt("OpenAI API key", hide_input=True)
    key = key.strip()

    click.echo("Checking key...")
    if not validate_api_key(key):
        raise click.ClickException(
            "Invalid API key or network error. Please check and try again."
        )

    store = _credentials()
    store.set_api_key(key)
    store.close()
    click.echo(click.style("Logged in.", fg="green", bold=True))


@cli.command()
def logout():
    """Remove the stored API key."""
    store = _credentials()
    was_authenticated = store.is_authenticated()
    store.set_api_key(None)
    store.close()
    click.echo("Logged out." if was_authenticated else "No API key stored.")


@cli.command()
def models():
    """List the available vision models."""
    click.echo()
    click.echo(click.style("Models", bold=True))
    for m in MODELS:
        marker = "*" if m.id == DEFAULT_MODEL else " "
        click.echo(f"  {marker} {m.id:<12} {m.name:<12} {m.description}")
    click.echo()


@cli.command()
@click.argument("text", default="")
@click.option(
    "--image", "images", multiple=True, type=click.Path(exists=True, dir_okay=False),
    help="Attach an image (repeatable)",
)
@click.option("--model", default=DEFAULT_MODEL, show_default=True, help="Model id")
def ask(text: str, images: tuple[str, ...], model: str):
    """Ask a single question and print the answer.

    Example:
        visionchat ask "Which option is correct?" --image question.jpg
    """
    from .session import ChatSession
    from .store import ConversationStore

    if not text.strip() and not images:
        raise click.UsageError("Provide some text or at least one --image.")
    _check_model(model)

    session = ChatSession(ConversationStore(selected_model=model), _require_api_key())
    reply = session.send(text, _load_images(images))
    if reply is not None:
        click.echo(reply.content)


_CHAT_HELP = """Commands:
  /new            start a new conversation
  /clear          clear the current conversation
  /list           list conversations
  /select ID      switch to a conversation
  /delete ID      delete a conversation
  /model ID       change the model
  /image PATH     attach an image to the next message
  /answers        show answers, newest first
  /quit           exit"""


@cli.command()
@click.option("--model", default=DEFAULT_MODEL, show_default=True, help="Model id")
@click.option("--history", is_flag=True, help="Send earlier turns along with each message")
def chat(model: str, history: bool):
    """Start an interactive chat. Type /help for commands."""
    from .session import ChatSession, image_data_url
    from .store import ConversationStore

    _check_model(model)
    store = ConversationStore(selected_model=model)
    session = ChatSession(store, _require_api_key(), include_history=history)
    store.create_conversation()
    pending_images: list[str] = []

    click.echo(f"Chatting with {model}. Type /help for commands.")
    while True:
        try:
            line = click.prompt("you", prompt_suffix="> ", default="", show_default=False)
        except (EOFError, click.Abort):
            click.echo()
            break

        command, _, arg = line.strip().partition(" ")
        arg = arg.strip()

        if command in ("/quit", "/exit"):
            break
        elif command == "/help":
            click.echo(_CHAT_HELP)
        elif command == "/new":
            conv = store.create_conversation()
            click.echo(f"New conversation {conv.id}")
        elif command == "/clear":
            if not store.clear_current_conversation():
                click.echo("No current conversation.")
        elif command == "/list":
            current = store.current_conversation
            for conv in store.conversations:
                marker = "*" if current is not None and conv.id == current.id else " "
                click.echo(f"  {marker} {conv.id}  {conv.title}  ({conv.model}, {len(conv.messages)} msgs)")
        elif command == "/select":
            if store.select_conversation(arg):
                click.echo(f"Switched to {arg} ({store.selected_model})")
            else:
                click.echo(f"No conversation {arg!r}.")
        elif command == "/delete":
            if not store.delete_conversation(arg):
                click.echo(f"No conversation {arg!r}.")
        elif command == "/model":
            if not arg:
                click.echo(f"Usage: /model ID (current: {store.selected_model})")
                continue
            _check_model(arg)
            store.set_selected_model(arg)
            click.echo(f"Model: {store.selected_model}")
        elif command == "/image":
            try:
                pending_images.append(image_data_url(arg))
            except OSError as exc:
                click.echo(f"Could not read image: {exc}", err=True)
        elif command == "/answers":
            for answer in store.answer_lines():
                click.echo(f"  {answer}")
        elif command.startswith("/"):
            click.echo(f"Unknown command {command}. Type /help for commands.")
        else:
            reply = session.send(line, pending_images)
            pending_images = []
            if reply is not None:
                click.echo(click.style("assistant> ", bold=True) + str(reply.content))


@cli.command()
def config():
    """Print data locations and the API endpoint."""
    store = _credentials()
    authenticated = store.is_authenticated()
    store.close()

    click.echo()
    click.echo(click.style("visionchat configuration", bold=True))
    click.echo(f"  Data dir:       {DATA_DIR}")
    click.echo(f"  Credentials:    {SQLITE_PATH}")
    click.echo(f"  API base:       {API_BASE_URL}")
    click.echo(f"  Logged in:      {'yes' if authenticated else 'no'}")
    click.echo()
