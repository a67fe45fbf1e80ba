import json
import logging
from pathlib import Path

from ayu.config import settings

logger = logging.getLogger(__name__)

TOKEN_KEY = "ayu_token"
PROFILE_KEY = "ayu_profile"

LOGIN_PATH = "/get-in"
PROTECTED_PATHS = ("/dashboard", "/ask-ai", "/explore", "/profile", "/settings")


class SessionStore:
    """Key/value JSON file playing the part of browser local storage."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or settings.SESSION_FILE)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return {}

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str):
        return self._load().get(key)

    def set(self, key: str, value) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class SessionContext:
    """Application-root provider for the signed-in token and profile."""

    def __init__(self, store: SessionStore | None = None):
        self.store = store or SessionStore()

    @property
    def token(self) -> str | None:
        return self.store.get(TOKEN_KEY)

    @property
    def profile(self) -> dict | None:
        return self.store.get(PROFILE_KEY)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def sign_in(self, token: str, profile: dict) -> None:
        self.store.set(TOKEN_KEY, token)
        self.store.set(PROFILE_KEY, profile)

    def update_profile(self, partial: dict) -> dict:
        merged = {**(self.profile or {}), **partial}
        self.store.set(PROFILE_KEY, merged)
        return merged

    def sign_out(self) -> None:
        self.store.remove(TOKEN_KEY)
        self.store.remove(PROFILE_KEY)


def is_protected(path: str) -> bool:
    return any(path == p or path.startswith(p + "/") for p in PROTECTED_PATHS)


def resolve_route(path: str, session: SessionContext) -> str:
    """Return the path to render: the requested one, or the login view."""
    if is_protected(path) and not session.is_authenticated:
        return LOGIN_PATH
    return path
