"""
Command for removing a worktree in git-wt.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from gitwt.core import WorktreeRepo, GitWtError
from gitwt.hooks import run_hooks, report_results
from gitwt.store import REMOVE_COMMANDS, resolve_config_path


def remove_worktree(
    repo: WorktreeRepo,
    path: Optional[str] = None,
    force: bool = False,
    config_path: Optional[Path] = None,
    verbose: bool = False
) -> int:
    """Run the repository's remove hooks, then remove the worktree.

    Without `path` the worktree containing the current directory is removed.
    """
    target = Path(path).resolve() if path else repo.worktree_root

    if target == repo.main_worktree:
        print(f"Error: Refusing to remove the main worktree {target}", file=sys.stderr)
        return 1

    if not repo.is_worktree(target):
        print(f"Error: {target} is not a worktree of {repo.repo_name}", file=sys.stderr)
        return 1

    # Hooks see the worktree before it disappears.
    results = run_hooks(repo.repo_name, target, REMOVE_COMMANDS, config_path)
    report_results(results, verbose)

    try:
        print(f"Removing worktree {target}")
        repo.remove_worktree(target, force=force)
    except GitWtError as e:
        print(f"Error removing worktree: {e}", file=sys.stderr)
        return 1

    print("Worktree removed successfully")
    return 0


def main(args: List[str]) -> int:
    """Main entry point for rm command."""
    parser = argparse.ArgumentParser(
        prog='git-wt rm',
        description='Run remove commands, then remove a worktree'
    )
    parser.add_argument(
        'path',
        nargs='?',
        help='Worktree to remove (default: the current worktree)'
    )
    parser.add_argument(
        '--force',
        '-f',
        action='store_true',
        help='Remove the worktree even if it has local changes'
    )
    parser.add_argument(
        '--config-file',
        metavar='PATH',
        help='Git configuration file whose directory holds .gitconfig_wt'
    )
    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Show detailed output'
    )

    parsed_args = parser.parse_args(args)

    try:
        repo = WorktreeRepo()
        return remove_worktree(
            repo,
            parsed_args.path,
            parsed_args.force,
            resolve_config_path(parsed_args.config_file),
            parsed_args.verbose
        )
    except GitWtError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
