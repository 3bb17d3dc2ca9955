"""
Symbolic link helpers.
"""

import os
from pathlib import Path

from gitmaketree.core import GitMakeTreeError


def create_or_replace_symlink(link: Path, target: Path) -> None:
    """Point ``link`` at ``target``, replacing an old link or file of that name.

    Unlike ``ln -sf``, an existing link to a directory is replaced rather
    than followed. A real directory at ``link`` is left alone and reported.
    """
    link = Path(link)
    if link.is_symlink() or link.is_file():
        link.unlink()
    elif link.exists():
        raise GitMakeTreeError(f"{link} exists and is not a link")

    os.symlink(str(target), str(link), target_is_directory=True)
