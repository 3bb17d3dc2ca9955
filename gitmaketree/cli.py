"""
CLI interface for gitmaketree.
"""

import sys
from typing import List, Optional

from .commands import create, install


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    ``gitmaketree install [alias]`` edits the shell profile; anything else is
    a worktree path.
    """
    if args is None:
        args = sys.argv[1:]

    if not args:
        create.create_parser().print_help()
        return 1

    if args[0] == 'install':
        return install.main(args[1:])
    return create.main(args)


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == '__main__':
    run()
