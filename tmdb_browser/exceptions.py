"""
Exceptions raised by the TMDB Browser core.
"""

from typing import Optional


class TMDBError(Exception):
    """A request to the metadata API failed (non-2xx status or transport error)."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @classmethod
    def from_response(cls, status_code: int, body: str) -> "TMDBError":
        message = f"API Error: {status_code}"
        if body:
            message = f"{message} - {body}"
        return cls(message, status_code=status_code, body=body)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class StorageError(Exception):
    """Reading or writing the local key-value store failed."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)
