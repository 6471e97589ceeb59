"""Command-line interface for mygit"""
import argparse
import logging
import sys

from .codec import MODE_TREE, to_hex
from .errors import MygitError
from .repo import Repo


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='mygit')
    parser.add_argument('-v', '--verbose', action='store_true')
    sub = parser.add_subparsers(dest='cmd')

    sub.add_parser('init')

    p_cat = sub.add_parser('cat-file')
    g = p_cat.add_mutually_exclusive_group(required=True)
    g.add_argument('-p', dest='show', action='store_const', const='payload')
    g.add_argument('-t', dest='show', action='store_const', const='type')
    g.add_argument('-s', dest='show', action='store_const', const='size')
    p_cat.add_argument('object')

    p_hash = sub.add_parser('hash-object'); p_hash.add_argument('-w', action='store_true', dest='write'); p_hash.add_argument('file')

    p_ls = sub.add_parser('ls-tree'); p_ls.add_argument('--name-only', action='store_true'); p_ls.add_argument('tree')

    p_write = sub.add_parser('write-tree'); p_write.add_argument('directory', nargs='?')

    p_commit = sub.add_parser('commit-tree')
    p_commit.add_argument('tree')
    p_commit.add_argument('-p', '--parent')
    p_commit.add_argument('-m', '--message', required=True)

    p_config = sub.add_parser('config'); p_config.add_argument('--name'); p_config.add_argument('--email')
    return parser


def print_tree(repo: Repo, sha: str, name_only: bool = False):
    for entry in repo.ls_tree(sha):
        if name_only:
            print(entry.name)
        else:
            kind = 'tree' if entry.mode == MODE_TREE else 'blob'
            print(f'{entry.mode.rjust(6, "0")} {kind} {to_hex(entry.digest)}\t{entry.name}')


def run(args, repo: Repo) -> int:
    if args.cmd == 'init':
        repo.init(); print(f'Initialized empty mygit repository in {repo.git_dir}'); return 0
    if args.cmd == 'cat-file':
        if args.show == 'type':
            print(repo.object_type(args.object))
        elif args.show == 'size':
            print(repo.object_size(args.object))
        elif repo.object_type(args.object) == 'tree':
            print_tree(repo, args.object)
        else:
            sys.stdout.write(repo.read_object(args.object))
        return 0
    if args.cmd == 'hash-object':
        print(repo.hash_blob(args.file, write=args.write)); return 0
    if args.cmd == 'ls-tree':
        print_tree(repo, args.tree, args.name_only); return 0
    if args.cmd == 'write-tree':
        print(repo.create_tree(args.directory)); return 0
    if args.cmd == 'commit-tree':
        print(repo.create_commit(args.tree, args.parent, args.message)); return 0
    if args.cmd == 'config':
        if args.name: repo.set_config('name', args.name)
        if args.email: repo.set_config('email', args.email)
        ident = repo.identity()
        print(f'{ident.name} <{ident.email}>'); return 0
    return 2


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')
    if not args.cmd:
        parser.print_help(); return 2
    try:
        return run(args, Repo('.'))
    except MygitError as e:
        print(f'fatal: {e}', file=sys.stderr)
        return 1


if __name__ == '__main__':
    raise SystemExit(main())
