"""Subcommand implementations for git-wt."""
