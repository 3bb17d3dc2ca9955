"""
Utilities for reading and maintaining .gitignore files.
"""

from pathlib import Path
from typing import List

GITIGNORE = '.gitignore'

# Bytes that are not UTF-8 survive a read/write round trip unchanged
ENCODING = 'utf-8'
ERRORS = 'surrogateescape'


def read_lines(gitignore_path: Path) -> List[str]:
    """Return the raw lines of a .gitignore file, without line endings."""
    if not gitignore_path.exists():
        return []
    with open(gitignore_path, 'r', encoding=ENCODING, errors=ERRORS) as f:
        return f.read().splitlines()


def ensure_gitignore(directory: Path) -> bool:
    """Make sure ``directory`` has a .gitignore.

    A newly created file ignores itself. Returns True when the file was
    created, False when it already existed.
    """
    gitignore_path = Path(directory) / GITIGNORE
    if gitignore_path.exists():
        return False

    with open(gitignore_path, 'w', encoding=ENCODING, errors=ERRORS) as f:
        f.write(f"{GITIGNORE}\n")
    return True


def ensure_ignore_entry(gitignore_path: Path, entry: str) -> None:
    """Make ``entry`` appear exactly once, as the last line of the file.

    Every existing line equal to ``entry`` is dropped before it is appended
    again, so repeated calls never duplicate it.
    """
    lines = [line for line in read_lines(gitignore_path) if line.strip() != entry]
    lines.append(entry)
    with open(gitignore_path, 'w', encoding=ENCODING, errors=ERRORS) as f:
        f.write('\n'.join(lines) + '\n')
