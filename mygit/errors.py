"""Exception classes raised by the object store and builders."""
from typing import Optional


class MygitError(Exception):
    """Base exception for mygit errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        if self.details:
            return f'{self.message}: {self.details}'
        return self.message


class FilesystemError(MygitError):
    """Raised when reading, writing or stat'ing a path fails."""
    pass


class ObjectNotFound(MygitError):
    """Raised when a digest is not present in the object store."""
    pass


class CorruptObject(MygitError):
    """Raised when stored bytes cannot be inflated."""
    pass


class MalformedObject(MygitError):
    """Raised when serialized bytes do not follow `<kind> <len>\\0<payload>`."""
    pass


class InvalidArguments(MygitError):
    """Raised at the boundary for bad user input such as a non-hex digest."""
    pass
