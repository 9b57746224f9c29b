from .base import DirectoryClient
from .directory import DirectoryService

__all__ = [
    "DirectoryClient",
    "DirectoryService",
]
