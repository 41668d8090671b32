"""
Command for opening a worktree with the configured open commands.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from gitwt.core import WorktreeRepo, GitWtError
from gitwt.hooks import run_hooks, report_results
from gitwt.store import OPEN_COMMANDS, resolve_config_path


def open_worktree(
    repo: WorktreeRepo,
    branch: Optional[str] = None,
    config_path: Optional[Path] = None,
    verbose: bool = False
) -> int:
    """Run the repository's open commands inside a worktree.

    The worktree is the one with `branch` checked out, or the current one.
    """
    if branch:
        target = repo.find_worktree(branch)
        if target is None:
            print(f"Error: No worktree has branch '{branch}' checked out", file=sys.stderr)
            return 1
    else:
        target = repo.worktree_root

    if verbose:
        print(f"Opening {target}")

    results = run_hooks(repo.repo_name, target, OPEN_COMMANDS, config_path)
    if not results:
        print(f"No open commands configured for '{repo.repo_name}'")
        print("Add one with: git-wt config --open 'code .'")
        return 0

    report_results(results, verbose)
    return 0


def main(args: List[str]) -> int:
    """Main entry point for open command."""
    parser = argparse.ArgumentParser(
        prog='git-wt open',
        description='Run the open commands inside a worktree'
    )
    parser.add_argument(
        'branch',
        nargs='?',
        help='Branch whose worktree to open (default: the current worktree)'
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
        return open_worktree(
            repo,
            parsed_args.branch,
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
