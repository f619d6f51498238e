import logging
from pathlib import Path

import yaml

TALLY_DIR = Path.home() / ".tally"
STORE_PATH = TALLY_DIR / "store.json"
CONFIG_PATH = TALLY_DIR / "config.yaml"
LOG_DIR = TALLY_DIR / "logs"

_PRIORITIES = ("low", "medium", "high")


class Config:
    """Single-instance config manager. Load once, cache in memory."""

    _instance: "Config | None" = None
    _data: dict[str, object]

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = {}
            cls._instance._load()
        return cls._instance

    def _load(self) -> None:
        """Load config from disk."""
        if not CONFIG_PATH.exists():
            self._data = {}
            return
        try:
            with CONFIG_PATH.open() as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError):
            self._data = {}
            return
        self._data = loaded if isinstance(loaded, dict) else {}

    def _save(self) -> None:
        """Persist config to disk."""
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        with CONFIG_PATH.open("w") as f:
            yaml.dump(self._data, f, default_flow_style=False, allow_unicode=True)

    def get(self, key: str, default: object = None) -> object:
        """Get config value."""
        return self._data.get(key, default)

    def set(self, key: str, value: object) -> None:
        """Set config value and persist."""
        self._data[key] = value
        self._save()

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance so the next access rereads CONFIG_PATH."""
        cls._instance = None


def get_store_path() -> Path:
    """JSON store location: `store_path` from config, else STORE_PATH."""
    val = Config().get("store_path")
    return Path(str(val)).expanduser() if val else STORE_PATH


def get_default_priority() -> str:
    """Priority for new tasks when none is given."""
    val = str(Config().get("default_priority") or "").strip().lower()
    return val if val in _PRIORITIES else "medium"


def get_log_level() -> int:
    """Console log level; unknown names fall back to WARNING."""
    name = str(Config().get("log_level") or "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING
