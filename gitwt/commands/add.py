"""
Command for adding a new worktree in git-wt.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from gitwt.core import WorktreeRepo, GitWtError
from gitwt.hooks import run_hooks, report_results
from gitwt.store import CREATE_COMMANDS, resolve_config_path


def add_worktree(
    repo: WorktreeRepo,
    branch: str,
    force: bool = False,
    config_path: Optional[Path] = None,
    verbose: bool = False
) -> int:
    """Create a worktree for `branch` and run the repository's create hooks."""
    path = repo.worktree_path_for(branch)

    if path.exists():
        print(f"Error: Path {path} already exists", file=sys.stderr)
        return 1

    branch_exists = repo.branch_exists(branch)
    if branch_exists and not force:
        print(f"Error: Branch '{branch}' already exists locally "
              f"(use --force to check it out)", file=sys.stderr)
        return 1

    try:
        if verbose:
            print(f"Repository: {repo.repo_name} ({repo.main_worktree})")
        print(f"Creating worktree for '{branch}' at {path}")
        repo.create_worktree(path, branch, new_branch=not branch_exists)
    except GitWtError as e:
        print(f"Error creating worktree: {e}", file=sys.stderr)
        return 1

    results = run_hooks(repo.repo_name, path, CREATE_COMMANDS, config_path)
    report_results(results, verbose)

    print("Worktree created successfully")
    return 0


def main(args: List[str]) -> int:
    """Main entry point for add command."""
    parser = argparse.ArgumentParser(
        prog='git-wt add',
        description='Create a worktree for a branch and run its create commands'
    )
    parser.add_argument(
        'branch',
        help='Branch to check out in the new worktree'
    )
    parser.add_argument(
        '--force',
        '-f',
        action='store_true',
        help='Check out a branch that already exists locally'
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
        return add_worktree(
            repo,
            parsed_args.branch,
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
