"""Canonical object serialization: `<kind> <len>\\0<payload>` and its SHA-1.

Tree payloads are a run of `<mode> <name>\\0<20 raw digest bytes>` entries,
sorted by the bytes of the name.
"""
import hashlib
import os
import string
from typing import List, NamedTuple, Tuple, Union

from .errors import InvalidArguments, MalformedObject

KINDS = ('blob', 'tree', 'commit')
DIGEST_SIZE = 20

MODE_TREE = '40000'
MODE_FILE = '100644'
MODE_EXECUTABLE = '100755'
MODE_SYMLINK = '120000'
TREE_MODES = (MODE_TREE, MODE_FILE, MODE_EXECUTABLE, MODE_SYMLINK)


class TreeEntry(NamedTuple):
    mode: str
    name: str
    digest: bytes


def serialize(kind: str, payload: bytes) -> bytes:
    if kind not in KINDS:
        raise MalformedObject('unknown object kind', kind)
    return f'{kind} {len(payload)}'.encode() + b'\x00' + payload


def hash_object(data: bytes) -> bytes:
    return hashlib.sha1(data).digest()


def deserialize(raw: bytes) -> Tuple[str, int, bytes]:
    header, sep, payload = raw.partition(b'\x00')
    if not sep:
        raise MalformedObject('missing header separator')
    kind, space, size = header.decode('ascii', errors='replace').partition(' ')
    if not space:
        raise MalformedObject('bad object header', repr(header))
    if kind not in KINDS:
        raise MalformedObject('unknown object kind', kind)
    if not size.isdigit():
        raise MalformedObject('bad object length', size)
    length = int(size)
    if length != len(payload):
        raise MalformedObject('length mismatch', f'header says {length}, payload is {len(payload)}')
    return kind, length, payload


def _name_key(entry: TreeEntry) -> bytes:
    return os.fsencode(entry.name)


def format_tree(entries: List[TreeEntry]) -> bytes:
    ordered = sorted(entries, key=_name_key)
    out = []
    prev = None
    for entry in ordered:
        if entry.name == prev:
            raise MalformedObject('duplicate tree entry', entry.name)
        if not entry.name or '/' in entry.name or '\x00' in entry.name:
            raise MalformedObject('bad tree entry name', repr(entry.name))
        if len(entry.digest) != DIGEST_SIZE:
            raise MalformedObject('bad digest size for tree entry', entry.name)
        out.append(entry.mode.encode() + b' ' + os.fsencode(entry.name) + b'\x00' + entry.digest)
        prev = entry.name
    return b''.join(out)


def parse_tree(payload: bytes) -> List[TreeEntry]:
    entries = []
    pos = 0
    while pos < len(payload):
        space = payload.find(b' ', pos)
        nul = payload.find(b'\x00', pos)
        if space < 0 or nul < 0 or space > nul:
            raise MalformedObject('truncated tree entry', f'offset {pos}')
        end = nul + 1 + DIGEST_SIZE
        if end > len(payload):
            raise MalformedObject('truncated tree entry digest', f'offset {pos}')
        try:
            mode = payload[pos:space].decode('ascii')
        except UnicodeDecodeError as e:
            raise MalformedObject('bad tree entry mode', f'offset {pos}') from e
        if mode not in TREE_MODES:
            raise MalformedObject('bad tree entry mode', mode)
        name = os.fsdecode(payload[space + 1:nul])
        entries.append(TreeEntry(mode, name, payload[nul + 1:end]))
        pos = end
    return entries


def to_hex(digest: Union[bytes, str]) -> str:
    if isinstance(digest, str):
        return digest
    return digest.hex()


def from_hex(oid: str) -> bytes:
    oid = oid.strip().lower()
    if len(oid) != DIGEST_SIZE * 2 or any(c not in string.hexdigits for c in oid):
        raise InvalidArguments('not a valid object name', oid)
    return bytes.fromhex(oid)
