"""A minimal git-compatible loose-object store and commit builder."""
from .errors import (CorruptObject, FilesystemError, InvalidArguments,
                     MalformedObject, MygitError, ObjectNotFound)
from .repo import Repo

__all__ = [
    'Repo',
    'MygitError',
    'FilesystemError',
    'ObjectNotFound',
    'CorruptObject',
    'MalformedObject',
    'InvalidArguments',
]
