"""
Durable key-value storage for the admin credentials.

The console keeps the bearer token and the admin profile under two fixed
keys. Both keys are always written together and removed together.
"""

import json
from pathlib import Path
from typing import MutableMapping, Optional, Protocol

from pydantic import ValidationError as PydanticValidationError

from infomed.core.config import Settings
from infomed.core.logging import get_logger
from infomed.schemas import AdminProfile

logger = get_logger(__name__)

TOKEN_KEY = "adminToken"
ADMIN_KEY = "adminData"

SESSION_STORAGE_KEY = "infomed_storage"


class KeyValueStorage(Protocol):
    """Minimal string key-value interface, like a browser's localStorage."""

    def get(self, key: str) -> Optional[str]: ...

    def set_many(self, items: dict[str, str]) -> None: ...

    def remove_many(self, keys: list[str]) -> None: ...


class MemoryStorage:
    """Storage kept in a dict for the lifetime of the object."""

    def __init__(self, data: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_many(self, items: dict[str, str]) -> None:
        self.data.update(items)

    def remove_many(self, keys: list[str]) -> None:
        for key in keys:
            self.data.pop(key, None)


class SessionStorage(MemoryStorage):
    """
    Storage scoped to one browser session.

    The dict lives inside ``session_state`` (``st.session_state`` in the
    app), so every browser tab gets its own credentials and survives page
    switches and reruns, but not a new session.
    """

    def __init__(self, session_state: MutableMapping, key: str = SESSION_STORAGE_KEY):
        if key not in session_state:
            session_state[key] = {}
        self.data = session_state[key]


class FileStorage:
    """
    Storage backed by a JSON object on disk.

    Every process and browser session pointed at the same file shares one
    login, so this backend suits a single admin running the console locally.
    The file is re-read on every access.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Ignoring corrupt storage file {self.path}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_many(self, items: dict[str, str]) -> None:
        data = self._read()
        data.update(items)
        self._write(data)

    def remove_many(self, keys: list[str]) -> None:
        data = self._read()
        if any(key in data for key in keys):
            for key in keys:
                data.pop(key, None)
            self._write(data)


def build_storage(settings: Settings, session_state: Optional[MutableMapping] = None) -> KeyValueStorage:
    """
    Create the storage backend selected by STORAGE_BACKEND.

    Args:
        settings: Application settings
        session_state: Per-browser mapping, required by the "session" backend

    Raises:
        ValueError: If the backend is unknown or has no session mapping
    """
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "session":
        if session_state is None:
            raise ValueError("The session storage backend needs a session_state mapping")
        return SessionStorage(session_state)
    if backend == "memory":
        return MemoryStorage()
    if backend == "file":
        return FileStorage(settings.storage_file)
    raise ValueError(f"Unknown storage backend: {settings.STORAGE_BACKEND}")


class CredentialStore:
    """The persisted (token, admin profile) pair."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    @property
    def token(self) -> Optional[str]:
        """Current bearer token, if any."""
        return self.storage.get(TOKEN_KEY) or None

    def load(self) -> Optional[tuple[str, AdminProfile]]:
        """
        Read the persisted pair.

        Returns:
            (token, admin) when both keys are present and the profile
            parses, otherwise None
        """
        token = self.storage.get(TOKEN_KEY)
        raw_admin = self.storage.get(ADMIN_KEY)
        if not token or not raw_admin:
            return None

        try:
            admin = AdminProfile.model_validate_json(raw_admin)
        except PydanticValidationError:
            logger.warning("Stored admin profile is unreadable")
            return None
        return token, admin

    def has_any(self) -> bool:
        """Check whether either key is present."""
        return bool(self.storage.get(TOKEN_KEY) or self.storage.get(ADMIN_KEY))

    def save(self, token: str, admin: AdminProfile) -> None:
        """Write both keys in one operation."""
        self.storage.set_many({TOKEN_KEY: token, ADMIN_KEY: json.dumps(admin.to_wire())})

    def clear(self) -> None:
        """Remove both keys in one operation."""
        self.storage.remove_many([TOKEN_KEY, ADMIN_KEY])
