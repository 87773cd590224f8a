# src/mirror/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving the package paths the mirror reads from.
    """

    @staticmethod
    def get_package_root() -> Path:
        """Returns the directory of the 'mirror' package (src/mirror)."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"

    @staticmethod
    def get_templates_root() -> Path:
        return PathUtils.get_package_root() / "server" / "templates"
