"""Last-known-good configuration store.

The accepted configuration text is written to a single fixed file in the
agent's run folder after every successful apply. The file is overwritten
each time; it is read back on restart to restore the device and by
operators for audit.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from ..config.identity import DEFAULT_RUN_FOLDER
from ..errors import PersistenceError
from ..syscmd.files import save_to_file

logger = logging.getLogger(__name__)

AP_CONFIG_FILE_NAME = "ap_config.json"


class ConfigStore:
    """Persists the serialized configuration at ``run_folder/ap_config.json``."""

    def __init__(self, run_folder: Optional[Union[str, Path]] = None):
        self.run_folder = Path(run_folder) if run_folder else DEFAULT_RUN_FOLDER

    @property
    def path(self) -> Path:
        return self.run_folder / AP_CONFIG_FILE_NAME

    def save(self, config_text: str) -> Path:
        """Overwrite the stored configuration.

        Raises:
            PersistenceError: If the file cannot be written
        """
        try:
            path = save_to_file(self.run_folder, AP_CONFIG_FILE_NAME, config_text)
        except OSError as e:
            raise PersistenceError(f"failed to save configuration to {self.path}: {e}") from e
        logger.debug(f"Saved {len(config_text)} bytes to {path}")
        return path

    def load(self) -> Optional[str]:
        """Return the stored configuration text, or None if nothing is stored.

        Raises:
            PersistenceError: If the file exists but cannot be read
        """
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"failed to read stored configuration {self.path}: {e}") from e
