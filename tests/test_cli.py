"""
Tests for the git-wt command line interface.
"""

import io
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

import git

from gitwt.cli import create_parser, main
from gitwt.store import CREATE_COMMANDS, ConfigLocationError, WT_CONFIG_FILENAME, get_entries


class TestParser(unittest.TestCase):
    """Test argument parsing."""

    def test_add_arguments(self):
        args = create_parser().parse_args(['add', 'feature/login', '--force'])
        self.assertEqual(args.command, 'add')
        self.assertEqual(args.branch, 'feature/login')
        self.assertTrue(args.force)

    def test_config_arguments_repeat(self):
        args = create_parser().parse_args([
            'config', '--create', 'npm install', '--create', 'code .', '--remove', 'echo bye'
        ])
        self.assertEqual(args.create, ['npm install', 'code .'])
        self.assertEqual(args.remove, ['echo bye'])
        self.assertIsNone(args.open)

    def test_no_command(self):
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            self.assertEqual(main([]), 1)
        self.assertIn('usage: git-wt', stdout.getvalue())


class TestCommands(unittest.TestCase):
    """Test git-wt commands against a real repository."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.temp_path = Path(self.temp_dir).resolve()
        self.repo_dir = self.temp_path / 'project'
        self.repo_dir.mkdir()
        self.config_path = self.temp_path / 'home' / '.gitconfig'

        self.git_repo = git.Repo.init(self.repo_dir)
        self.git_repo.index.commit('initial')

        self.old_cwd = os.getcwd()
        os.chdir(self.repo_dir)

    def tearDown(self):
        os.chdir(self.old_cwd)
        self.git_repo.close()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _main(self, *args):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(['--config-file', str(self.config_path)] + list(args))
        return code, stdout.getvalue(), stderr.getvalue()

    def test_config_adds_commands(self):
        code, stdout, _ = self._main('config', '--create', 'npm install', '--create', 'code .')

        self.assertEqual(code, 0)
        self.assertIn('Added project.create_commands = npm install', stdout)
        self.assertEqual(
            get_entries('project', CREATE_COMMANDS, self.config_path),
            ['npm install', 'code .']
        )
        self.assertTrue((self.config_path.parent / WT_CONFIG_FILENAME).is_file())

    def test_config_get_and_list(self):
        self._main('config', '--remove', 'echo one', '--remove', 'echo two')

        code, stdout, _ = self._main('config', '--get', 'remove_commands')
        self.assertEqual(code, 0)
        self.assertEqual(stdout.strip(), 'remove_commands = echo two')

        code, stdout, _ = self._main('config', '--list')
        self.assertEqual(code, 0)
        self.assertIn('[project]', stdout)
        self.assertIn('remove_commands = echo one\nremove_commands = echo two', stdout)

    def test_config_get_missing(self):
        code, stdout, _ = self._main('config', '--get', 'open_commands')
        self.assertEqual(code, 1)
        self.assertIn("Configuration key 'open_commands' not found", stdout)

    def test_config_summary(self):
        self._main('config', '--open', 'code .')

        code, stdout, _ = self._main('config')
        self.assertEqual(code, 0)
        self.assertIn('open_commands', stdout)
        self.assertIn('1 configured', stdout)

    def test_add_runs_create_hooks(self):
        self._main('config', '--create', 'touch created.txt')

        code, stdout, stderr = self._main('add', 'feature/login')

        worktree = self.temp_path / 'project-feature-login'
        self.assertEqual(code, 0, stderr)
        self.assertTrue(worktree.is_dir())
        self.assertTrue((worktree / 'created.txt').exists())
        self.assertIn('Executing: touch created.txt', stdout)
        self.assertIn('feature/login', [head.name for head in self.git_repo.heads])

    def test_add_existing_branch_requires_force(self):
        self.git_repo.create_head('existing')

        code, _, stderr = self._main('add', 'existing')
        self.assertEqual(code, 1)
        self.assertIn("Branch 'existing' already exists", stderr)
        self.assertFalse((self.temp_path / 'project-existing').exists())

        code, _, stderr = self._main('add', 'existing', '--force')
        self.assertEqual(code, 0, stderr)
        self.assertTrue((self.temp_path / 'project-existing').is_dir())

    def test_add_existing_path(self):
        (self.temp_path / 'project-taken').mkdir()

        code, _, stderr = self._main('add', 'taken')
        self.assertEqual(code, 1)
        self.assertIn('already exists', stderr)

    def test_add_continues_past_failing_hook(self):
        self._main('config', '--create', 'gitwt-missing-command', '--create', 'touch after.txt')

        code, _, stderr = self._main('add', 'feature/hooks')

        self.assertEqual(code, 0)
        self.assertTrue((self.temp_path / 'project-feature-hooks' / 'after.txt').exists())
        self.assertIn('1 of 2 hook commands could not be run', stderr)

    def test_rm_runs_remove_hooks_before_removal(self):
        self._main('add', 'feature/old')
        worktree = self.temp_path / 'project-feature-old'
        self._main('config', '--remove', 'cp README ../seen.txt')
        (worktree / 'README').write_text('still here\n')

        code, _, stderr = self._main('rm', '--force', str(worktree))

        self.assertEqual(code, 0, stderr)
        self.assertFalse(worktree.exists())
        self.assertEqual((self.temp_path / 'seen.txt').read_text(), 'still here\n')

    def test_rm_current_worktree(self):
        self._main('add', 'feature/current')
        worktree = self.temp_path / 'project-feature-current'
        os.chdir(worktree)

        code, _, stderr = self._main('rm')

        os.chdir(self.repo_dir)
        self.assertEqual(code, 0, stderr)
        self.assertFalse(worktree.exists())

    def test_rm_refuses_main_worktree(self):
        code, _, stderr = self._main('rm')
        self.assertEqual(code, 1)
        self.assertIn('Refusing to remove the main worktree', stderr)
        self.assertTrue(self.repo_dir.is_dir())

    def test_rm_unknown_path(self):
        other = self.temp_path / 'other'
        other.mkdir()

        code, _, stderr = self._main('rm', str(other))
        self.assertEqual(code, 1)
        self.assertIn('is not a worktree of project', stderr)

    def test_open_current_worktree(self):
        self._main('config', '--open', 'touch opened.txt')

        code, _, stderr = self._main('open')

        self.assertEqual(code, 0, stderr)
        self.assertTrue((self.repo_dir / 'opened.txt').exists())

    def test_open_branch_worktree(self):
        self._main('add', 'feature/open')
        self._main('config', '--open', 'touch opened.txt')

        code, _, stderr = self._main('open', 'feature/open')

        self.assertEqual(code, 0, stderr)
        self.assertTrue((self.temp_path / 'project-feature-open' / 'opened.txt').exists())
        self.assertFalse((self.repo_dir / 'opened.txt').exists())

    def test_open_unknown_branch(self):
        code, _, stderr = self._main('open', 'nowhere')
        self.assertEqual(code, 1)
        self.assertIn("No worktree has branch 'nowhere'", stderr)

    def test_open_without_commands(self):
        code, stdout, _ = self._main('open')
        self.assertEqual(code, 0)
        self.assertIn("No open commands configured for 'project'", stdout)

    def test_configuration_error_is_reported(self):
        wt_config = self.config_path.parent / WT_CONFIG_FILENAME
        wt_config.parent.mkdir(parents=True)
        wt_config.write_text('not a config file\n')

        code, _, stderr = self._main('config', '--list')
        self.assertEqual(code, 1)
        self.assertTrue(stderr.startswith('Error: '))

    @patch('gitwt.store.find_config_path', side_effect=ConfigLocationError('Unable to find XDG or user git configuration'))
    def test_no_configuration_location(self, mock_find):
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            code = main(['config', '--list'])

        self.assertEqual(code, 1)
        self.assertIn('Unable to find XDG or user git configuration', stderr.getvalue())

    def test_not_a_repository(self):
        outside = self.temp_path / 'outside'
        outside.mkdir()
        os.chdir(outside)

        code, _, stderr = self._main('config', '--list')
        self.assertEqual(code, 1)
        self.assertIn('Not a Git repository', stderr)


if __name__ == '__main__':
    unittest.main()
