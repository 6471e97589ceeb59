from datetime import datetime, timedelta, timezone

import pytest

from mygit.codec import to_hex
from mygit.commit import CommitBuilder, Identity, format_commit
from mygit.errors import InvalidArguments
from mygit.objects import ObjectStore
from mygit.repo import Repo

TREE = 'a' * 40
PARENT = 'b' * 40
WHEN = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_create_commit_with_parent(tmp_path):
    repo = Repo(tmp_path)
    oid = repo.create_commit(TREE, PARENT, 'hello')
    payload = repo.read_object(oid)
    lines = payload.splitlines()
    assert lines[0] == f'tree {TREE}'
    assert lines[1] == f'parent {PARENT}'
    assert lines[2].startswith('author John Doe <johndoe@example.com> ')
    assert lines[3].startswith('committer John Doe <johndoe@example.com> ')
    assert lines[4] == ''
    assert payload.endswith('hello\n')
    assert repo.object_type(oid) == 'commit'


def test_root_commit_has_no_parent_line(tmp_path):
    repo = Repo(tmp_path)
    payload = repo.read_object(repo.create_commit(TREE, None, 'root'))
    assert 'parent' not in payload
    assert payload.startswith(f'tree {TREE}\nauthor ')


def test_format_commit_exact():
    ident = Identity('Ada', 'ada@example.com')
    tz = timezone(timedelta(hours=-7))
    when = datetime(2024, 1, 1, 5, tzinfo=tz)
    assert format_commit(TREE, PARENT, 'msg', ident, ident, when) == (
        f'tree {TREE}\n'
        f'parent {PARENT}\n'
        'author Ada <ada@example.com> 1704110400 -0700\n'
        'committer Ada <ada@example.com> 1704110400 -0700\n'
        '\n'
        'msg\n'
    ).encode()


def test_commit_is_deterministic_for_fixed_time(tmp_path):
    builder = CommitBuilder(ObjectStore(tmp_path/'objects'))
    first = builder.build(TREE, None, 'same', when=WHEN)
    assert builder.build(TREE, None, 'same', when=WHEN) == first
    assert builder.build(TREE, PARENT, 'same', when=WHEN) != first
    assert len(to_hex(first)) == 40


def test_commit_rejects_bad_digests(tmp_path):
    repo = Repo(tmp_path)
    with pytest.raises(InvalidArguments):
        repo.create_commit('abc', None, 'msg')
    with pytest.raises(InvalidArguments):
        repo.create_commit(TREE, 'not-a-sha', 'msg')


def test_identity_from_config():
    assert Identity.from_config({}) == Identity()
    assert Identity.from_config({'user': {'name': 'Ada'}}) == Identity('Ada', 'johndoe@example.com')
