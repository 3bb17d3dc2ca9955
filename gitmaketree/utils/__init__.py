"""
Utility modules for gitmaketree.
"""

from .gitignore import (
    ensure_gitignore,
    ensure_ignore_entry
)

from .links import create_or_replace_symlink

from .prompt import confirm

from .shell_profile import (
    render_block,
    install_block,
    default_profile
)

__all__ = [
    # gitignore utilities
    'ensure_gitignore',
    'ensure_ignore_entry',

    # filesystem and terminal
    'create_or_replace_symlink',
    'confirm',

    # shell profile
    'render_block',
    'install_block',
    'default_profile'
]
