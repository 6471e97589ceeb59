"""Commit objects: a tree, at most one parent, author/committer lines and a message."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .codec import to_hex
from .objects import ObjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    name: str = 'John Doe'
    email: str = 'johndoe@example.com'

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> 'Identity':
        user = cfg.get('user', {})
        default = cls()
        return cls(name=user.get('name') or default.name,
                   email=user.get('email') or default.email)

    def signature(self, when: datetime) -> str:
        return f'{self.name} <{self.email}> {int(when.timestamp())} {when.strftime("%z")}'


def format_commit(tree: str, parent: Optional[str], message: str,
                  author: Identity, committer: Identity, when: datetime) -> bytes:
    lines = [f'tree {tree}']
    if parent:
        lines.append(f'parent {parent}')
    lines.append(f'author {author.signature(when)}')
    lines.append(f'committer {committer.signature(when)}')
    return ('\n'.join(lines) + f'\n\n{message}\n').encode()


class CommitBuilder:
    def __init__(self, store: ObjectStore):
        self.store = store

    def build(self, tree: str, parent: Optional[str] = None, message: str = '',
              identity: Optional[Identity] = None, when: Optional[datetime] = None) -> bytes:
        # tree/parent are not checked against the store
        identity = identity or Identity()
        when = when or datetime.now().astimezone()
        if when.tzinfo is None:
            when = when.astimezone()
        digest = self.store.write('commit', format_commit(tree, parent, message, identity, identity, when))
        logger.debug('commit %s on tree %s', to_hex(digest)[:8], tree[:8])
        return digest
