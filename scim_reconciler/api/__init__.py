from .directory import DirectoryApiClient, APIError, NotFoundError, ConflictError

__all__ = [
    "DirectoryApiClient",
    "APIError",
    "NotFoundError",
    "ConflictError",
]
