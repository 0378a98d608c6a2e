import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class LocalStore:
    """
    String key/value store persisted to one JSON file, with the same surface
    as browser localStorage. Values are stored as strings; callers JSON-encode
    lists themselves.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._data: Dict[str, str] = {}
        if path and os.path.exists(path):
            self._data = self._load(path)

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: Any) -> None:
        self._data[key] = value if isinstance(value, str) else json.dumps(value)
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def clear(self) -> None:
        self._data.clear()
        self._flush()

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            return default

    @staticmethod
    def _load(path: str) -> Dict[str, str]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", path, e)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring state file %s: expected a JSON object", path)
            return {}
        return {k: str(v) for k, v in raw.items()}

    def _flush(self) -> None:
        if not self.path:
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp = f"{self.path}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)
        os.replace(tmp, self.path)
