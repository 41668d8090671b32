"""
Command for managing per-repository hook configuration in git-wt.
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from gitwt.core import WorktreeRepo, GitWtError
from gitwt.store import (
    CREATE_COMMANDS,
    OPEN_COMMANDS,
    REMOVE_COMMANDS,
    MissingKeyError,
    add_entry,
    dedicated_config_path,
    get_entry,
    list_entries,
    resolve_config_path,
)


def manage_config(
    repo: WorktreeRepo,
    create_commands: Optional[List[str]] = None,
    remove_commands: Optional[List[str]] = None,
    open_commands: Optional[List[str]] = None,
    get_key: Optional[str] = None,
    list_config: bool = False,
    config_path: Optional[Path] = None,
    verbose: bool = False
) -> int:
    """Add hook commands or show the configuration of the current repository."""
    repo_name = repo.repo_name

    if verbose and config_path is not None:
        print(f"Configuration file: {dedicated_config_path(config_path)}")

    additions = [
        (CREATE_COMMANDS, create_commands or []),
        (REMOVE_COMMANDS, remove_commands or []),
        (OPEN_COMMANDS, open_commands or []),
    ]
    if any(commands for _, commands in additions):
        for key, commands in additions:
            for command in commands:
                add_entry(repo_name, key, command, config_path)
                print(f"Added {repo_name}.{key} = {command}")
        return 0

    if get_key:
        try:
            value = get_entry(repo_name, get_key, config_path)
        except MissingKeyError:
            print(f"Configuration key '{get_key}' not found for '{repo_name}'")
            return 1
        print(f"{get_key} = {value}")
        return 0

    entries = list_entries(repo_name, config_path)

    if list_config:
        print(f"git-wt configuration for '{repo_name}':")
        print("-" * 40)
        if not entries:
            print("  No configuration found")
            return 0
        print(f"\n[{repo_name}]")
        for key, values in entries.items():
            for value in values:
                print(f"{key} = {value}")
        return 0

    # Default behavior - show configuration summary
    print(f"git-wt configuration summary for '{repo_name}':")
    print("-" * 40)
    for key, desc in _get_config_descriptions().items():
        print(f"  {key} ({desc}): {len(entries.get(key, []))} configured")

    return 0


def _get_config_descriptions() -> Dict[str, str]:
    """Get descriptions for the hook keys git-wt runs."""
    return {
        CREATE_COMMANDS: 'run in a new worktree after it is created',
        REMOVE_COMMANDS: 'run in a worktree before it is removed',
        OPEN_COMMANDS: 'run in a worktree by `git-wt open`',
    }


def main(args: List[str]) -> int:
    """Main entry point for config command."""
    parser = argparse.ArgumentParser(
        prog='git-wt config',
        description='Add hook commands or show the repository configuration'
    )
    parser.add_argument(
        '--create',
        action='append',
        metavar='COMMAND',
        help='Add a command to run after a worktree is created'
    )
    parser.add_argument(
        '--remove',
        action='append',
        metavar='COMMAND',
        help='Add a command to run before a worktree is removed'
    )
    parser.add_argument(
        '--open',
        action='append',
        metavar='COMMAND',
        help='Add a command to run by git-wt open'
    )
    parser.add_argument(
        '--get',
        metavar='KEY',
        help='Get a configuration value'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List all configuration'
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
        return manage_config(
            repo,
            parsed_args.create,
            parsed_args.remove,
            parsed_args.open,
            parsed_args.get,
            parsed_args.list,
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
