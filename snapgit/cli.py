import argparse
import os
import sys
import textwrap
from datetime import datetime, timezone

from loguru import logger

from .base import Repository
from .config import get_settings
from .errors import SnapgitError
from .logger import configure_logging
from .merge import MergeStatus

DATE_FORMAT = '%a %b %d %H:%M:%S %Y %z'


def main(argv=None):
    args = parse_args(argv) #whatever is written in terminal is parsed into args
    settings = get_settings()
    configure_logging('DEBUG' if args.verbose else settings.log_level)
    repo = Repository(os.getcwd(), settings)
    try:
        return args.func(repo, args) or 0
    except SnapgitError as e:
        logger.debug(f"{type(e).__name__} ({e.kind})")
        print(e)
        return 1


def parse_args(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    # "checkout [commit] -- file": everything after "--" is the file operand
    paths = []
    if argv and argv[0] == 'checkout' and '--' in argv:
        split = argv.index('--')
        argv, paths = argv[:split], argv[split + 1:]

    parser = argparse.ArgumentParser(prog='snapgit')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    commands = parser.add_subparsers(dest='command')
    commands.required = True

    init_parser = commands.add_parser('init')
    init_parser.set_defaults(func=init)

    add_parser = commands.add_parser('add')
    add_parser.set_defaults(func=add)
    add_parser.add_argument('file')

    commit_parser = commands.add_parser('commit')
    commit_parser.set_defaults(func=commit)
    commit_parser.add_argument('message', nargs='?', default='')

    rm_parser = commands.add_parser('rm')
    rm_parser.set_defaults(func=rm)
    rm_parser.add_argument('file')

    checkout_parser = commands.add_parser('checkout')
    checkout_parser.set_defaults(func=checkout)
    checkout_parser.add_argument('target', nargs='?', help='branch name, or commit id before "--"')

    log_parser = commands.add_parser('log')
    log_parser.set_defaults(func=log)

    global_log_parser = commands.add_parser('global-log')
    global_log_parser.set_defaults(func=global_log)

    find_parser = commands.add_parser('find')
    find_parser.set_defaults(func=find)
    find_parser.add_argument('message')

    branch_parser = commands.add_parser('branch')
    branch_parser.set_defaults(func=branch)
    branch_parser.add_argument('name', nargs='?')

    rm_branch_parser = commands.add_parser('rm-branch')
    rm_branch_parser.set_defaults(func=rm_branch)
    rm_branch_parser.add_argument('name')

    status_parser = commands.add_parser('status')
    status_parser.set_defaults(func=status)

    reset_parser = commands.add_parser('reset')
    reset_parser.set_defaults(func=reset)
    reset_parser.add_argument('commit')

    merge_parser = commands.add_parser('merge')
    merge_parser.set_defaults(func=merge)
    merge_parser.add_argument('branch')

    args = parser.parse_args(argv)
    args.paths = paths
    if args.command == 'checkout':
        if len(paths) > 1 or (not paths and not args.target):
            parser.error('Incorrect operands.')
    return args


def init(repo, args):
    repo.init()
    print(f'Initialized empty snapgit repository in {repo.storage.git_dir}')


def add(repo, args):
    repo.add(args.file)


def commit(repo, args):
    print(repo.commit(args.message))


def rm(repo, args):
    repo.rm(args.file)


def checkout(repo, args):
    if args.paths:
        repo.checkout_file(args.paths[0], args.target)
    else:
        repo.checkout_branch(args.target)


def format_commit(oid, commit):
    lines = ['===', f'commit {oid}']
    if commit.merge_parent:
        lines.append(f'Merge: {commit.parent[:7]} {commit.merge_parent[:7]}')
    date = datetime.fromtimestamp(commit.timestamp, tz=timezone.utc).astimezone()
    lines.append(f'Date: {date.strftime(DATE_FORMAT)}')
    lines.append(commit.message)
    return '\n'.join(lines) + '\n'


def log(repo, args):
    for oid, commit in repo.log():
        print(format_commit(oid, commit))


def global_log(repo, args):
    for oid, commit in repo.global_log():
        print(format_commit(oid, commit))


def find(repo, args):
    for oid in repo.find(args.message):
        print(oid)


def branch(repo, args):
    if not args.name: #no name is passed print all branches
        current = repo.refs.current_branch()
        for name in repo.branches():
            prefix = '*' if name == current else ' '
            print(f'{prefix}{name}')
    else:
        oid = repo.branch(args.name)
        print(f'Branch {args.name} created at {oid[:10]}')


def rm_branch(repo, args):
    repo.rm_branch(args.name)


def status(repo, args):
    state = repo.status()
    print('=== Branches ===')
    for name in state.branches:
        print(f"{'*' if name == state.current else ''}{name}")
    sections = [
        ('Staged Files', state.staged),
        ('Removed Files', state.removed),
        ('Modifications Not Staged For Commit',
         [f'{path} ({change})' for path, change in state.modified.items()]),
        ('Untracked Files', state.untracked),
    ]
    for title, entries in sections:
        print(f'\n=== {title} ===')
        for entry in entries:
            print(entry)
    print()


def reset(repo, args):
    repo.reset(args.commit)


def merge(repo, args):
    result = repo.merge(args.branch)
    if result.status is MergeStatus.ALREADY_ANCESTOR:
        print('Given branch is an ancestor of the current branch.')
    elif result.status is MergeStatus.FAST_FORWARDED:
        print('Current branch fast-forwarded.')
    elif result.status is MergeStatus.CONFLICTED:
        print('Encountered a merge conflict.')
        print(textwrap.indent('\n'.join(result.conflicts), '    '))
    else:
        print(result.commit_id)
