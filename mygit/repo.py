"""Repository facade: bootstrap, config and the object read/write operations.

All digests crossing this boundary are 40-char lowercase hex strings.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .codec import TreeEntry, from_hex, hash_object, parse_tree, serialize, to_hex
from .commit import CommitBuilder, Identity
from .errors import FilesystemError, InvalidArguments
from .objects import ObjectStore
from .refs import DEFAULT_BRANCH, read_symbolic_ref, refs_dir, write_symbolic_ref
from .tree import DEFAULT_MAX_DEPTH, TreeBuilder

logger = logging.getLogger(__name__)

GIT_DIR = '.git'


class Repo:
    def __init__(self, path: str = '.', git_dir: str = GIT_DIR,
                 max_depth: int = DEFAULT_MAX_DEPTH, max_file_size: Optional[int] = None):
        self.workdir = Path(path).resolve()
        self.git_dir = self.workdir / git_dir
        self.objects = ObjectStore(self.git_dir / 'objects')
        self.trees = TreeBuilder(self.objects, ignore=(git_dir,),
                                 max_depth=max_depth, max_file_size=max_file_size)
        self.commits = CommitBuilder(self.objects)

    def init(self):
        try:
            self.objects.objects_dir.mkdir(parents=True, exist_ok=True)
            refs_dir(self.git_dir).mkdir(parents=True, exist_ok=True)
            if read_symbolic_ref(self.git_dir) is None:
                write_symbolic_ref(self.git_dir, 'HEAD', DEFAULT_BRANCH)
        except OSError as e:
            raise FilesystemError(f'cannot initialize repository in {self.git_dir}', str(e)) from e
        logger.debug('initialized repository in %s', self.git_dir)

    def set_config(self, key: str, value: str):
        cfg = self.get_config()
        cfg.setdefault('user', {})[key] = value
        cfgf = self.git_dir / 'config'
        try:
            cfgf.parent.mkdir(parents=True, exist_ok=True)
            cfgf.write_text(json.dumps(cfg, indent=2))
        except OSError as e:
            raise FilesystemError(f'cannot write {cfgf}', str(e)) from e

    def get_config(self) -> Dict[str, Any]:
        cfgf = self.git_dir / 'config'
        if not cfgf.exists():
            return {}
        try:
            return json.loads(cfgf.read_text())
        except OSError as e:
            raise FilesystemError(f'cannot read {cfgf}', str(e)) from e
        except ValueError as e:
            raise InvalidArguments(f'config file {cfgf} is not valid JSON', str(e)) from e

    def identity(self) -> Identity:
        return Identity.from_config(self.get_config())

    def _resolve(self, path) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.workdir / p

    def create_blob(self, file_path) -> str:
        return self.hash_blob(file_path, write=True)

    def hash_blob(self, file_path, write: bool = True) -> str:
        p = self._resolve(file_path)
        if not write:
            return to_hex(hash_object(serialize('blob', self.trees.read_blob(p))))
        return to_hex(self.trees.write_blob(p))

    def create_tree(self, directory=None) -> str:
        d = self.workdir if directory is None else self._resolve(directory)
        return to_hex(self.trees.build(d))

    def create_commit(self, tree_sha: str, parent_sha: Optional[str] = None, message: str = '') -> str:
        tree = to_hex(from_hex(tree_sha))
        parent = to_hex(from_hex(parent_sha)) if parent_sha else None
        return to_hex(self.commits.build(tree, parent, message, identity=self.identity()))

    def read_object(self, sha: str) -> str:
        _, payload = self.objects.read(from_hex(sha))
        return payload.decode('utf-8', errors='surrogateescape')

    def object_type(self, sha: str) -> str:
        kind, _ = self.objects.read(from_hex(sha))
        return kind

    def object_size(self, sha: str) -> int:
        _, payload = self.objects.read(from_hex(sha))
        return len(payload)

    def ls_tree(self, sha: str) -> List[TreeEntry]:
        kind, payload = self.objects.read(from_hex(sha))
        if kind != 'tree':
            raise InvalidArguments(f'not a tree object ({kind})', sha)
        return parse_tree(payload)
