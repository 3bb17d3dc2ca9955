"""
Command for installing the gitmaketree shell function into a shell profile.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from gitmaketree.core import GitMakeTreeError
from gitmaketree.logging_config import get_logger, setup_logging
from gitmaketree.utils.shell_profile import (
    default_profile,
    install_block,
    is_valid_alias,
    render_block,
)

logger = get_logger(__name__)

DEFAULT_ALIAS = 'gitmaketree'


def install(alias: str = DEFAULT_ALIAS, profile: Optional[Path] = None) -> int:
    """Write the alias block into ``profile``, replacing an earlier one."""
    if not is_valid_alias(alias):
        raise GitMakeTreeError(f"'{alias}' is not a valid shell function name")

    profile = Path(profile) if profile else default_profile()
    block = render_block(alias)

    try:
        replaced = install_block(profile, block)
    except OSError as e:
        raise GitMakeTreeError(f"Unable to update {profile}: {e}")

    action = "Replaced" if replaced else "Added"
    print(f"{action} gitmaketree block in {profile}")
    print("alias cd='cd -P'  # force cd to the physical path when following a symbolic link")
    print(f"function {alias} => gitmaketree, then cd into the new worktree")
    print()
    print(f"usage: {alias} <path_new_worktree>")
    print("       A new branch will be created from the name of the last directory in <path_new_worktree>")
    print(f"Run 'source {profile}' or open a new shell to use it.")
    return 0


def main(args: List[str]) -> int:
    """Main entry point for install command."""
    parser = argparse.ArgumentParser(
        prog='gitmaketree install',
        description='Install the gitmaketree shell function and cd alias'
    )
    parser.add_argument(
        'alias',
        nargs='?',
        default=DEFAULT_ALIAS,
        help=f'Name of the shell function (default: {DEFAULT_ALIAS})'
    )
    parser.add_argument(
        '--profile',
        type=Path,
        help='Shell profile to edit (default: ~/.zshrc for zsh, else ~/.bashrc)'
    )
    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Show detailed output'
    )

    parsed_args = parser.parse_args(args)
    setup_logging(verbose=parsed_args.verbose)

    try:
        return install(parsed_args.alias, parsed_args.profile)
    except GitMakeTreeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
