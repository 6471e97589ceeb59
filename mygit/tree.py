"""Build tree objects from a directory on disk (depth-first, post-order)."""
import logging
import os
import stat
from pathlib import Path
from typing import Iterable, List, Optional

from .codec import (MODE_EXECUTABLE, MODE_FILE, MODE_SYMLINK, MODE_TREE,
                    TreeEntry, format_tree, to_hex)
from .errors import FilesystemError
from .objects import ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256


def file_mode(path: Path) -> str:
    """Map lstat type/permission bits to a tree entry mode string."""
    st = os.lstat(path)
    if stat.S_ISDIR(st.st_mode):
        return MODE_TREE
    if stat.S_ISLNK(st.st_mode):
        return MODE_SYMLINK
    if st.st_mode & 0o111:
        return MODE_EXECUTABLE
    return MODE_FILE


class TreeBuilder:
    def __init__(self, store: ObjectStore, ignore: Iterable[str] = ('.git',),
                 max_depth: int = DEFAULT_MAX_DEPTH, max_file_size: Optional[int] = None):
        self.store = store
        self.ignore = frozenset(ignore)
        self.max_depth = max_depth
        self.max_file_size = max_file_size

    def build(self, directory: Path) -> bytes:
        """Store every blob and subtree under `directory` and return the root tree digest.

        The root always produces a tree, even an empty one. Any filesystem
        failure aborts the whole build.
        """
        entries = self._collect(Path(directory), 0)
        return self._write_tree(Path(directory), entries)

    def read_blob(self, path: Path) -> bytes:
        """Blob content for `path`: the link target for symlinks, file bytes otherwise."""
        path = Path(path)
        try:
            if path.is_symlink():
                data = os.fsencode(os.readlink(path))
            else:
                if self.max_file_size is not None and path.stat().st_size > self.max_file_size:
                    raise FilesystemError('file too large', str(path))
                data = path.read_bytes()
        except OSError as e:
            raise FilesystemError(f'cannot read {path}', str(e)) from e
        return data

    def write_blob(self, path: Path) -> bytes:
        return self.store.write('blob', self.read_blob(path))

    def _collect(self, directory: Path, depth: int) -> List[TreeEntry]:
        if depth > self.max_depth:
            raise FilesystemError('directory nesting too deep', str(directory))
        try:
            with os.scandir(directory) as it:
                children = list(it)
        except OSError as e:
            raise FilesystemError(f'cannot read directory {directory}', str(e)) from e

        entries = []
        for child in children:
            path = Path(child.path)
            try:
                is_dir = child.is_dir(follow_symlinks=False)
            except OSError as e:
                raise FilesystemError(f'cannot stat {path}', str(e)) from e
            if is_dir and child.name in self.ignore:
                continue
            if is_dir:
                sub_entries = self._collect(path, depth + 1)
                # empty directories are not recorded
                if not sub_entries:
                    continue
                digest = self._write_tree(path, sub_entries)
                entries.append(TreeEntry(MODE_TREE, child.name, digest))
            else:
                digest = self.write_blob(path)
                try:
                    mode = file_mode(path)
                except OSError as e:
                    raise FilesystemError(f'cannot stat {path}', str(e)) from e
                entries.append(TreeEntry(mode, child.name, digest))
        return entries

    def _write_tree(self, directory: Path, entries: List[TreeEntry]) -> bytes:
        digest = self.store.write('tree', format_tree(entries))
        logger.debug('tree %s for %s (%d entries)', to_hex(digest)[:8], directory, len(entries))
        return digest
