"""
Core git-wt functionality - Git repository wrapper and worktree management.
"""

import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Union

import git
from git import Repo


class GitWtError(Exception):
    """Base exception for git-wt operations."""
    pass


class WorktreeRepo:
    """Wrapper around Git repository for worktree operations."""

    def __init__(self, repo_path: Optional[str] = None):
        """Initialize with repository path (defaults to current directory)."""
        self.repo_path = Path(repo_path) if repo_path else Path.cwd()
        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            raise GitWtError(f"Not a Git repository: {self.repo_path}")

    @property
    def main_worktree(self) -> Path:
        """Root of the main worktree, shared by every linked worktree."""
        return Path(self.repo.common_dir).resolve().parent

    @property
    def repo_name(self) -> str:
        """Repository name used to namespace hook configuration."""
        return self.main_worktree.name

    @property
    def worktree_root(self) -> Path:
        """Root of the worktree this repository was opened from."""
        if self.repo.working_tree_dir is None:
            raise GitWtError(f"Bare repositories have no worktree: {self.repo_path}")
        return Path(self.repo.working_tree_dir).resolve()

    def worktree_path_for(self, branch: str) -> Path:
        """Directory for a new worktree of `branch`, next to the main worktree.

        Slashes in the branch name become dashes so that `feature/login`
        does not create nested folders.
        """
        dir_name = f"{self.repo_name}-{branch.replace('/', '-')}"
        return self.main_worktree.parent / dir_name

    def branch_exists(self, branch: str) -> bool:
        """Check whether a local branch exists."""
        return any(head.name == branch for head in self.repo.heads)

    def get_worktrees(self) -> List[Dict[str, str]]:
        """Get all worktrees for this repository."""
        result = subprocess.run(
            ['git', 'worktree', 'list', '--porcelain'],
            cwd=self.main_worktree,
            capture_output=True,
            text=True
        )
        if result.returncode != 0:
            raise GitWtError(f"Failed to list worktrees: {result.stderr.strip()}")

        worktrees = []
        current_worktree: Dict[str, str] = {}
        for line in result.stdout.split('\n'):
            line = line.strip()
            if line.startswith('worktree '):
                if current_worktree:
                    worktrees.append(current_worktree)
                current_worktree = {'path': line[9:]}
            elif line.startswith('HEAD '):
                current_worktree['head'] = line[5:]
            elif line.startswith('branch '):
                current_worktree['branch'] = line[7:]

        if current_worktree:
            worktrees.append(current_worktree)

        return worktrees

    def find_worktree(self, branch: str) -> Optional[Path]:
        """Find the worktree that has `branch` checked out."""
        ref = f"refs/heads/{branch}"
        for worktree in self.get_worktrees():
            if worktree.get('branch') == ref:
                return Path(worktree['path'])
        return None

    def is_worktree(self, path: Union[str, Path]) -> bool:
        """Check if a path is one of this repository's worktrees."""
        target = Path(path).resolve()
        return any(Path(wt['path']).resolve() == target for wt in self.get_worktrees())

    def create_worktree(self, path: Union[str, Path], branch: str, new_branch: bool = True) -> None:
        """Create a new worktree, creating `branch` first unless it already exists."""
        args = ['git', 'worktree', 'add']
        if new_branch:
            args.extend(['-b', branch, str(path)])
        else:
            args.extend([str(path), branch])

        result = subprocess.run(args, cwd=self.main_worktree, capture_output=True, text=True)
        if result.returncode != 0:
            raise GitWtError(f"Failed to create worktree: {result.stderr.strip()}")

    def remove_worktree(self, path: Union[str, Path], force: bool = False) -> None:
        """Remove a worktree."""
        args = ['git', 'worktree', 'remove']
        if force:
            args.append('--force')
        args.append(str(path))

        result = subprocess.run(args, cwd=self.main_worktree, capture_output=True, text=True)
        if result.returncode != 0:
            raise GitWtError(f"Failed to remove worktree: {result.stderr.strip()}")
