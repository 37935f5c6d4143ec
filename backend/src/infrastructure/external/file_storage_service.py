"""
LocalFileStorageService
Stores uploads under the upload directory and serves them from a public base URL
"""
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from core.config import settings
from core.logging_config import logger
from application.services.files.interfaces import IFileStorageService


class LocalFileStorageService(IFileStorageService):
    """Local filesystem storage service"""

    def __init__(self, base_path: Optional[str] = None, base_url: Optional[str] = None):
        """
        Initialize file storage service

        Args:
            base_path: Base directory for file storage (default from settings)
            base_url: URL prefix the stored files are served under
        """
        self.base_path = Path(base_path or settings.UPLOAD_DIR).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.base_url = (base_url or settings.PUBLIC_FILES_BASE_URL).rstrip("/")

    async def save(self, path: str, content: bytes) -> str:
        """
        Write content to path below the base directory

        Returns:
            Public URL of the stored file
        """
        file_path = self._resolve(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"Error saving file {path}: {e}")
            raise

        logger.info(f"File saved successfully: {path} ({len(content)} bytes)")
        return self.public_url(path)

    async def read(self, path: str) -> bytes:
        async with aiofiles.open(self._resolve(path), "rb") as f:
            return await f.read()

    async def delete(self, path: str) -> bool:
        """Delete file from storage"""
        file_path = self._resolve(path)
        if not file_path.exists():
            return False
        await aiofiles.os.remove(file_path)
        logger.info(f"File deleted: {path}")
        return True

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _resolve(self, path: str) -> Path:
        """Absolute location of path; paths escaping the base directory are rejected"""
        file_path = (self.base_path / path.lstrip("/")).resolve()
        if self.base_path not in file_path.parents:
            raise ValueError(f"Storage path escapes the upload directory: {path}")
        return file_path
