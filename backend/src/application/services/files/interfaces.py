"""
File Storage Interface
Binary uploads addressed by a relative storage path
"""
from abc import ABC, abstractmethod


class IFileStorageService(ABC):
    """File storage interface"""

    @abstractmethod
    async def save(self, path: str, content: bytes) -> str:
        """Store content at path and return its public URL"""
        pass

    @abstractmethod
    async def read(self, path: str) -> bytes:
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """False when nothing was stored at path"""
        pass

    @abstractmethod
    def public_url(self, path: str) -> str:
        pass
