from __future__ import annotations
from pathlib import Path
import fcntl
import os
from typing import Any, Dict
import yaml

from spamgate.configuration.classifier_settings import ClassifierSettings
from spamgate.util.logger import get_logger

logger = get_logger("app_configuration")


DEFAULT_CONFIG_PATH = "config/app_config.yml"

DEFAULT_IDENTITY = "Anonymous"
DEFAULT_VOCABULARY_PATH = "config/vocabulary.json"
DEFAULT_ROOM = "comments"


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml``, exposes
    dictionary-like access helpers, and resolves classifier settings through
    :class:`ClassifierSettings`. Uses fcntl file locks for safe concurrent
    access across processes.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found; using defaults.", self.config_path)
            return {}
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping.

        The returned dict is the internal cache; callers should not mutate it.
        """
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    def resolve_path(self, value: str) -> Path:
        """Resolve a configured path relative to the working directory."""
        return Path(value).expanduser().resolve()

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def default_identity(self) -> str:
        """Return the author name used until the user picks one."""
        value = self._data.get("default_identity")
        return str(value).strip() if value and str(value).strip() else DEFAULT_IDENTITY

    @property
    def vocabulary_path(self) -> Path:
        """Return the location of the pre-built vocabulary JSON file."""
        value = self._data.get("vocabulary_path") or DEFAULT_VOCABULARY_PATH
        return self.resolve_path(str(value))

    @property
    def broadcast_room(self) -> str:
        """Return the broadcast room the client joins."""
        broadcast = self._data.get("broadcast", {})
        if isinstance(broadcast, dict) and broadcast.get("room"):
            return str(broadcast["room"])
        return DEFAULT_ROOM

    @property
    def classifier(self) -> ClassifierSettings:
        """Return the classifier settings wrapped in a ClassifierSettings helper."""
        settings = self._data.get("classifier", {})
        if not isinstance(settings, dict):
            settings = {}
        return ClassifierSettings(settings)


def default_config_path() -> Path:
    """Return the config file location, honouring the SPAMGATE_CONFIG override."""
    return Path(os.getenv("SPAMGATE_CONFIG", DEFAULT_CONFIG_PATH)).expanduser().resolve()
