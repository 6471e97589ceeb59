"""Object storage: zlib-compressed loose objects sharded by the first two hex chars"""
import logging
import os
import tempfile
import zlib
from pathlib import Path
from typing import Tuple, Union

from .codec import deserialize, from_hex, hash_object, serialize, to_hex
from .errors import CorruptObject, FilesystemError, ObjectNotFound

logger = logging.getLogger(__name__)

Oid = Union[bytes, str]


class ObjectStore:
    def __init__(self, objects_dir: Path):
        self.objects_dir = Path(objects_dir)

    def object_path(self, oid: Oid) -> Path:
        if isinstance(oid, str):
            oid = to_hex(from_hex(oid))
        else:
            oid = to_hex(oid)
        return self.objects_dir / oid[:2] / oid[2:]

    def exists(self, oid: Oid) -> bool:
        return self.object_path(oid).is_file()

    def put(self, digest: bytes, data: bytes) -> bool:
        """Store serialized `data` under `digest`; returns False if it was already there.

        The compressed bytes go to a temporary file in the shard directory and
        are renamed into place, so readers never see a partial object.
        """
        p = self.object_path(digest)
        if p.exists():
            logger.debug('object %s already stored, skipped', to_hex(digest)[:8])
            return False
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=p.parent, prefix='tmp_obj_')
            try:
                with os.fdopen(fd, 'wb') as f:
                    f.write(zlib.compress(data))
                os.chmod(tmp, 0o444)
                os.replace(tmp, p)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as e:
            raise FilesystemError(f'cannot write object {to_hex(digest)}', str(e)) from e
        logger.debug('stored object %s (%d bytes)', to_hex(digest)[:8], len(data))
        return True

    def get(self, oid: Oid) -> bytes:
        p = self.object_path(oid)
        try:
            compressed = p.read_bytes()
        except FileNotFoundError as e:
            raise ObjectNotFound('object not found', to_hex(oid)) from e
        except OSError as e:
            raise FilesystemError(f'cannot read object {to_hex(oid)}', str(e)) from e
        try:
            return zlib.decompress(compressed)
        except zlib.error as e:
            raise CorruptObject(f'cannot inflate object {to_hex(oid)}', str(e)) from e

    def write(self, kind: str, payload: bytes) -> bytes:
        data = serialize(kind, payload)
        digest = hash_object(data)
        self.put(digest, data)
        return digest

    def read(self, oid: Oid) -> Tuple[str, bytes]:
        kind, _, payload = deserialize(self.get(oid))
        return kind, payload
