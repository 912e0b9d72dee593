# Overview: Device key/value storage for the client (user id and display name).

import json
import os
from pathlib import Path
from typing import Dict, Optional, Union

USER_ID_KEY = "userId"
USER_NAME_KEY = "userName"


class DeviceStore:
    """
    String key/value store persisted to a JSON file.

    With path=None the store lives in memory only.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        self._items: Dict[str, str] = {}
        if self.path is not None and self.path.exists():
            with self.path.open("r", encoding="utf-8") as fh:
                self._items = {str(k): str(v) for k, v in json.load(fh).items()}

    @classmethod
    def default(cls) -> "DeviceStore":
        path = os.environ.get("BOOKSTORE_CLIENT_STORE")
        if not path:
            path = Path.home() / ".bookstore" / "storage.json"
        return cls(path)

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(self._items, fh)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value) -> None:
        self._items[key] = str(value)
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def clear(self) -> None:
        self._items = {}
        self._flush()

    # Session helpers

    def save_user(self, user_id: int, display_name: str) -> None:
        self._items[USER_ID_KEY] = str(user_id)
        self._items[USER_NAME_KEY] = display_name
        self._flush()

    def user_id(self) -> Optional[int]:
        raw = self._items.get(USER_ID_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def user_name(self) -> Optional[str]:
        return self._items.get(USER_NAME_KEY)
