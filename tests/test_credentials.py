from __future__ import annotations

from visionchat.credentials import CredentialStore


def test_api_key_lifecycle(tmp_path):
    db_path = tmp_path / "nested" / "visionchat.db"
    store = CredentialStore(db_path)

    assert store.get_api_key() is None
    assert store.is_authenticated() is False

    store.set_api_key("sk-one")
    store.set_api_key("sk-two")
    assert store.get_api_key() == "sk-two"
    store.close()

    reopened = CredentialStore(db_path)
    assert reopened.is_authenticated() is True
    assert reopened.get_api_key() == "sk-two"

    reopened.set_api_key(None)
    assert reopened.get_api_key() is None
    reopened.close()
