"""
Shared helpers for gitmaketree tests.
"""

import shutil
import tempfile
import unittest
from pathlib import Path

import git
from git import Actor

ACTOR = Actor('Test User', 'test@example.com')


def init_repo(path: Path, branch: str = 'main') -> git.Repo:
    """Create a repository at ``path`` with one commit on ``branch``."""
    path.mkdir(parents=True, exist_ok=True)
    repo = git.Repo.init(path)
    with repo.config_writer() as writer:
        writer.set_value('user', 'name', ACTOR.name)
        writer.set_value('user', 'email', ACTOR.email)

    (path / 'README.md').write_text('# test repository\n')
    repo.index.add(['README.md'])
    repo.index.commit('Initial commit', author=ACTOR, committer=ACTOR)
    repo.git.branch('-M', branch)
    return repo


class TempDirTestCase(unittest.TestCase):
    """TestCase with a resolved temporary directory removed after each test."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.temp_path = Path(self.temp_dir).resolve()
        self.addCleanup(shutil.rmtree, self.temp_dir, ignore_errors=True)


def count_entry(gitignore_path: Path, entry: str) -> int:
    """How many lines of an ignore file are exactly ``entry``."""
    if not gitignore_path.exists():
        return 0
    lines = gitignore_path.read_bytes().decode('utf-8', 'surrogateescape').splitlines()
    return sum(1 for line in lines if line.strip() == entry)
