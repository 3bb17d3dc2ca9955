"""
Tests for gitmaketree utilities.
"""

import os
import unittest
from pathlib import Path
from unittest.mock import patch

from gitmaketree.core import GitMakeTreeError
from gitmaketree.utils.gitignore import (
    ensure_gitignore,
    ensure_ignore_entry,
    read_lines,
)
from gitmaketree.utils.links import create_or_replace_symlink
from gitmaketree.utils.prompt import confirm
from gitmaketree.utils.shell_profile import (
    BEGIN_MARKER,
    CD_FILE_ENV_VAR,
    END_MARKER,
    default_profile,
    install_block,
    is_valid_alias,
    render_block,
    strip_block,
)

from helpers import TempDirTestCase, count_entry


class TestGitIgnoreUtils(TempDirTestCase):
    """Test gitignore utility functions."""

    def test_ensure_gitignore_creates_self_ignoring_file(self):
        created = ensure_gitignore(self.temp_path)

        self.assertTrue(created)
        self.assertEqual(read_lines(self.temp_path / '.gitignore'), ['.gitignore'])

    def test_ensure_gitignore_keeps_existing_file(self):
        gitignore_file = self.temp_path / '.gitignore'
        gitignore_file.write_text('*.pyc\n')

        created = ensure_gitignore(self.temp_path)

        self.assertFalse(created)
        self.assertEqual(gitignore_file.read_text(), '*.pyc\n')

    def test_ensure_ignore_entry_appends(self):
        gitignore_file = self.temp_path / '.gitignore'
        gitignore_file.write_text('*.pyc\n')

        ensure_ignore_entry(gitignore_file, '_feature-x')

        self.assertEqual(read_lines(gitignore_file), ['*.pyc', '_feature-x'])

    def test_ensure_ignore_entry_keeps_non_utf8_bytes(self):
        gitignore_file = self.temp_path / '.gitignore'
        gitignore_file.write_bytes(b'caf\xe9\n_parent\n')

        ensure_ignore_entry(gitignore_file, '_parent')
        ensure_ignore_entry(gitignore_file, '_parent')

        self.assertEqual(gitignore_file.read_bytes(), b'caf\xe9\n_parent\n')

    def test_ensure_ignore_entry_without_trailing_newline(self):
        gitignore_file = self.temp_path / '.gitignore'
        gitignore_file.write_text('*.pyc')

        ensure_ignore_entry(gitignore_file, '_parent')

        self.assertEqual(gitignore_file.read_text(), '*.pyc\n_parent\n')

    def test_ensure_ignore_entry_removes_duplicates(self):
        gitignore_file = self.temp_path / '.gitignore'
        gitignore_file.write_text('_feature-x\n*.pyc\n_feature-x\n_feature-xy\n')

        ensure_ignore_entry(gitignore_file, '_feature-x')

        self.assertEqual(read_lines(gitignore_file), ['*.pyc', '_feature-xy', '_feature-x'])

    def test_ensure_ignore_entry_is_idempotent(self):
        gitignore_file = self.temp_path / '.gitignore'
        ensure_gitignore(self.temp_path)

        for _ in range(3):
            ensure_ignore_entry(gitignore_file, '_feature-x')

        self.assertEqual(count_entry(gitignore_file, '_feature-x'), 1)
        self.assertEqual(count_entry(gitignore_file, '.gitignore'), 1)

    def test_ensure_ignore_entry_creates_missing_file(self):
        gitignore_file = self.temp_path / '.gitignore'

        ensure_ignore_entry(gitignore_file, '_parent')

        self.assertEqual(read_lines(gitignore_file), ['_parent'])


class TestLinks(TempDirTestCase):
    """Test symbolic link creation."""

    def setUp(self):
        super().setUp()
        self.target = self.temp_path / 'feature-x'
        self.target.mkdir()
        self.link = self.temp_path / '_feature-x'

    def test_create_link(self):
        create_or_replace_symlink(self.link, self.target)

        self.assertTrue(self.link.is_symlink())
        self.assertEqual(self.link.resolve(), self.target)

    def test_replace_existing_link(self):
        other = self.temp_path / 'other'
        other.mkdir()
        os.symlink(str(other), str(self.link))

        create_or_replace_symlink(self.link, self.target)

        self.assertEqual(self.link.resolve(), self.target)
        # the old link target must not receive a nested link
        self.assertEqual(list(other.iterdir()), [])

    def test_replace_regular_file(self):
        self.link.write_text('stale')

        create_or_replace_symlink(self.link, self.target)

        self.assertTrue(self.link.is_symlink())

    def test_refuses_real_directory(self):
        self.link.mkdir()

        with self.assertRaises(GitMakeTreeError):
            create_or_replace_symlink(self.link, self.target)

        self.assertFalse(self.link.is_symlink())

    def test_dangling_target(self):
        missing = self.temp_path / 'missing'

        create_or_replace_symlink(self.link, missing)

        self.assertTrue(self.link.is_symlink())
        self.assertFalse(self.link.exists())


class TestPrompt(unittest.TestCase):
    """Test the Y/N confirmation."""

    def test_yes_answers(self):
        for reply in ('y', 'Y', 'yes', 'Yep', '  y'):
            with patch('builtins.input', return_value=reply):
                self.assertTrue(confirm('Continue'), reply)

    def test_no_answers(self):
        for reply in ('n', 'N', '', 'maybe', 'no'):
            with patch('builtins.input', return_value=reply):
                self.assertFalse(confirm('Continue'), reply)

    def test_question_format(self):
        with patch('builtins.input', return_value='y') as mock_input:
            confirm('WARNING: Something. Continue')
        mock_input.assert_called_once_with('WARNING: Something. Continue [Y/N]? ')

    def test_eof_is_no(self):
        with patch('builtins.input', side_effect=EOFError):
            self.assertFalse(confirm('Continue'))


class TestShellProfile(TempDirTestCase):
    """Test the shell profile block."""

    def setUp(self):
        super().setUp()
        self.profile = self.temp_path / '.bashrc'

    def test_render_block(self):
        block = render_block('gmt')

        self.assertTrue(block.startswith(BEGIN_MARKER))
        self.assertTrue(block.rstrip().endswith(END_MARKER))
        self.assertIn("alias cd='cd -P'", block)
        self.assertIn('gmt() {', block)
        self.assertIn(f'{CD_FILE_ENV_VAR}="$cd_file" command gitmaketree "$@"', block)

    def test_install_into_missing_profile(self):
        replaced = install_block(self.profile, render_block('gitmaketree'))

        self.assertFalse(replaced)
        self.assertEqual(self.profile.read_text(), render_block('gitmaketree'))

    def test_install_preserves_other_content(self):
        self.profile.write_text('export PATH="$HOME/bin:$PATH"')

        install_block(self.profile, render_block('gitmaketree'))

        content = self.profile.read_text()
        self.assertTrue(content.startswith('export PATH="$HOME/bin:$PATH"\n\n'))
        self.assertTrue(content.endswith(render_block('gitmaketree')))

    def test_install_replaces_prior_block(self):
        self.profile.write_text('# before\n' + render_block('old') + '# after\n')

        replaced = install_block(self.profile, render_block('new'))

        content = self.profile.read_text()
        self.assertTrue(replaced)
        self.assertEqual(content.count(BEGIN_MARKER), 1)
        self.assertNotIn('old() {', content)
        self.assertIn('new() {', content)
        self.assertIn('# before', content)
        self.assertIn('# after', content)

    def test_install_twice_is_stable(self):
        self.profile.write_text('alias ll="ls -l"\n')
        install_block(self.profile, render_block('gitmaketree'))
        first = self.profile.read_text()

        install_block(self.profile, render_block('gitmaketree'))

        self.assertEqual(self.profile.read_text(), first)

    def test_strip_block_removes_all_blocks(self):
        text = render_block('a') + 'keep\n' + render_block('b')
        self.assertEqual(strip_block(text), 'keep\n')

    def test_default_profile(self):
        self.assertEqual(default_profile('/bin/zsh'), Path.home() / '.zshrc')
        self.assertEqual(default_profile('/bin/bash'), Path.home() / '.bashrc')
        self.assertEqual(default_profile(''), Path.home() / '.bashrc')

    def test_is_valid_alias(self):
        self.assertTrue(is_valid_alias('gitmaketree'))
        self.assertTrue(is_valid_alias('gmt_2'))
        self.assertFalse(is_valid_alias(''))
        self.assertFalse(is_valid_alias('rm -rf'))
        self.assertFalse(is_valid_alias('a;b'))
        self.assertFalse(is_valid_alias('1abc'))


if __name__ == '__main__':
    unittest.main()
