from __future__ import annotations

import hmac
import logging
import os
import uuid
from pathlib import Path

log = logging.getLogger(__name__)


def default_token_path() -> Path:
    return Path.home() / ".config" / "trackpad-relay" / "token"


class TokenStore:
    """File-backed secret store: one token per file, owner-only permissions."""

    def __init__(self, path: Path | None = None):
        self.path = path or default_token_path()

    def load(self) -> str | None:
        # unreadable counts as missing; a fresh token is generated instead
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None
        token = text.strip()
        return token or None

    def save(self, token: str) -> None:
        d = self.path.parent
        d.mkdir(parents=True, exist_ok=True)
        os.chmod(d, 0o700)
        # created 0600; never world-readable, even briefly
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(token)
        os.chmod(self.path, 0o600)


class AuthManager:
    """
    Holds the single shared secret.

    Resolution order: explicit token, then the store, then a freshly generated
    uuid4 (122 random bits) which is persisted. Read-only after construction.
    """

    def __init__(self, token: str | None = None, store: TokenStore | None = None):
        if token:
            self._token = token
            return
        store = store or TokenStore()
        stored = store.load()
        if stored is not None:
            self._token = stored
            return
        self._token = str(uuid.uuid4())
        try:
            store.save(self._token)
        except OSError as e:
            log.warning("Failed to save auth token to %s: %s", store.path, e)
        else:
            log.info("Generated new auth token at %s", store.path)

    @property
    def current_token(self) -> str:
        return self._token

    def validate(self, candidate: object) -> bool:
        # constant time not required: the token is not a MAC key
        if not isinstance(candidate, str):
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self._token.encode("utf-8"))
