"""
CLI interface for git-wt.
"""

import sys
import argparse
from typing import Optional, List

from . import __version__
from .core import WorktreeRepo, GitWtError
from .store import resolve_config_path
from .commands.add import add_worktree
from .commands.config import manage_config
from .commands.open import open_worktree
from .commands.rm import remove_worktree


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='git-wt',
        description='A git extension to make `git worktree` easier to use'
    )

    # Add global options
    parser.add_argument(
        '--version', '-v',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    parser.add_argument(
        '--config-file',
        metavar='PATH',
        help='Git configuration file whose directory holds the git-wt config '
             '(default: XDG git config, then ~/.gitconfig)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    add_parser = subparsers.add_parser('add', help='Add a new folder with a worktree')
    add_parser.add_argument(
        'branch',
        help="The new branch's name (slashes become dashes in the folder name)"
    )
    add_parser.add_argument(
        '--force', '-f',
        action='store_true',
        help='Check out the branch even if it already exists locally'
    )

    rm_parser = subparsers.add_parser(
        'rm',
        help="Remove a worktree after it's been merged or no longer needed"
    )
    rm_parser.add_argument('path', nargs='?', help='Worktree to remove (default: current)')
    rm_parser.add_argument(
        '--force', '-f',
        action='store_true',
        help='Remove even if the worktree has local changes'
    )

    config_parser = subparsers.add_parser(
        'config',
        help='Configure per-repo helpers and specific behaviors'
    )
    config_parser.add_argument(
        '--create',
        action='append',
        metavar='CMD',
        help='Command to run after every successful new worktree'
    )
    config_parser.add_argument(
        '--remove',
        action='append',
        metavar='CMD',
        help='Command to run before every worktree removal'
    )
    config_parser.add_argument(
        '--open',
        action='append',
        metavar='CMD',
        help="Command to run by 'git-wt open', e.g. 'code .'"
    )
    config_parser.add_argument('--get', metavar='KEY', help='Get configuration value')
    config_parser.add_argument('--list', action='store_true', help='List all configuration')

    open_parser = subparsers.add_parser(
        'open',
        help='Run the configured open commands in a worktree'
    )
    open_parser.add_argument('branch', nargs='?', help='Branch of the worktree (default: current)')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    if args is None:
        args = sys.argv[1:]

    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    try:
        repo = WorktreeRepo()
        config_path = resolve_config_path(parsed_args.config_file)

        if parsed_args.command == 'add':
            return add_worktree(
                repo,
                parsed_args.branch,
                parsed_args.force,
                config_path,
                parsed_args.verbose
            )
        elif parsed_args.command == 'rm':
            return remove_worktree(
                repo,
                parsed_args.path,
                parsed_args.force,
                config_path,
                parsed_args.verbose
            )
        elif parsed_args.command == 'config':
            return manage_config(
                repo,
                parsed_args.create,
                parsed_args.remove,
                parsed_args.open,
                parsed_args.get,
                parsed_args.list,
                config_path,
                parsed_args.verbose
            )
        else:
            return open_worktree(
                repo,
                parsed_args.branch,
                config_path,
                parsed_args.verbose
            )

    except GitWtError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        if parsed_args.verbose:
            import traceback
            traceback.print_exc()
        else:
            print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
