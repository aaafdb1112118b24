import logging
import aiofiles
from pathlib import Path
from ..core.config import Config
from ..core.exceptions import FileServiceError

logger = logging.getLogger(__name__)

class FileService:
    """Service for asynchronous file operations."""

    def __init__(self, config: Config):
        self.config = config
        self.work_dir = config.work_dir

    async def read_file(self, file_path: Path | str) -> str:
        """Read file content asynchronously, with validation."""
        full_path = self.work_dir.joinpath(file_path).resolve()

        try:
            if not full_path.exists():
                raise FileServiceError(f"File not found: {full_path}")

            if not full_path.is_file():
                raise FileServiceError(f"Not a file: {full_path}")

            if full_path.stat().st_size > self.config.max_file_size:
                raise FileServiceError(f"File is too large: {full_path} ({full_path.stat().st_size} bytes)")

            async with aiofiles.open(full_path, 'r', encoding='utf-8') as f:
                content = await f.read()
            logger.debug(f"Successfully read file: {full_path}")
            return content

        except UnicodeDecodeError:
            logger.error(f"Unicode decode error for file: {full_path}")
            raise FileServiceError(f"Unable to decode file as UTF-8: {full_path}")
        except FileServiceError:
            raise
        except OSError as e:
            logger.error(f"Unexpected error reading file {full_path}: {e}")
            raise FileServiceError(f"Error reading file {full_path}: {e}")
