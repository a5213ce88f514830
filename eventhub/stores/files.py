import logging
import uuid
from pathlib import Path

from eventhub.stores.interfaces import FileStorage

logger = logging.getLogger(__name__)


class LocalFileStorage(FileStorage):
    """Keeps uploads as flat files named ``<uuid><extension>`` in one directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _is_valid_id(self, file_id: str) -> bool:
        return bool(file_id) and Path(file_id).name == file_id and file_id not in {".", ".."}

    def exists(self, file_id: str) -> bool:
        return self._is_valid_id(file_id) and self.path_for(file_id).is_file()

    def save(self, filename: str, content: bytes) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Ids fit the 41 characters an event can reference
        file_id = f"{uuid.uuid4()}{Path(filename).suffix[:5]}"
        self.path_for(file_id).write_bytes(content)
        logger.info("Stored upload %s (%d bytes)", file_id, len(content))
        return file_id

    def path_for(self, file_id: str) -> Path:
        return self.directory / file_id
