# src/mirror/core/managers/config_manager.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from mirror.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Read access to the mirror's settings.json, with runtime overrides on top.

    The file is never written. Overrides set through set_nested (the CLI flags of
    bu-mirror) win over the file on lookup and are dropped again by reset().
    """

    def __init__(self, settings_file: Optional[Path] = None):
        self._settings_file = settings_file
        self._file_values: Dict[str, Any] = {}
        self._overrides: Dict[str, Any] = {}
        self.reset()

    @property
    def settings_file(self) -> Path:
        return self._settings_file or PathUtils.get_settings_file()

    @staticmethod
    def _lookup(tree: Dict[str, Any], keys: List[str]) -> Any:
        node: Any = tree
        for key in keys:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        return node

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Looks up a dotted key such as 'session.time_out', override first."""
        keys = key_path.split('.')
        for source in (self._overrides, self._file_values):
            value = self._lookup(source, keys)
            if value is not None:
                return value
        return default

    def set_nested(self, key_path: str, value: Any) -> None:
        """Overrides a dotted key for the lifetime of this process."""
        *parents, leaf = key_path.split('.')
        node = self._overrides
        for key in parents:
            node = node.setdefault(key, {})
        node[leaf] = value
        logger.debug("Override set: %s = %r", key_path, value)

    def reset(self) -> None:
        """Drops all overrides and reloads the settings file."""
        self._overrides = {}
        self._file_values = self._load(self.settings_file)

    @staticmethod
    def _load(path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.warning("No settings file at %s, built-in defaults apply.", path)
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Unreadable settings file %s: %s", path, e, exc_info=True)
            return {}
        if not isinstance(loaded, dict):
            logger.error("Settings file %s does not hold a JSON object.", path)
            return {}
        logger.debug("Settings loaded from %s.", path)
        return loaded


# Shared instance used by the server and the fetcher.
config_manager = ConfigManager()
