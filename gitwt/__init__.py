"""
git-wt - A Python CLI tool that makes `git worktree` easier to use.

git-wt creates and removes worktrees next to the main checkout and runs
per-repository hook commands (stored in a dedicated git config file) when a
worktree is created, removed or opened.
"""

__version__ = "0.1.0"
__author__ = "git-wt"
