"""
Command for creating a linked worktree with gitmaketree.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from gitmaketree import __version__
from gitmaketree.config import OVERWRITE_POLICIES, load_config
from gitmaketree.core import GitMakeTreeError, InvalidNameError, UserAbortError
from gitmaketree.logging_config import get_logger, setup_logging
from gitmaketree.manager import WorktreeManager
from gitmaketree.models import WorktreeRequest
from gitmaketree.utils.shell_profile import CD_FILE_ENV_VAR

logger = get_logger(__name__)

USAGE_EPILOG = (
    "A new branch will be created from the name of the last directory in <path>. "
    "To install the shell function, use: gitmaketree install [alias]"
)


def make_tree(
    manager: WorktreeManager,
    target_path: str,
    extra_paths: Optional[List[str]] = None,
    cd_file: Optional[str] = None,
    verbose: bool = False
) -> int:
    """Create (or refresh) the worktree at ``target_path`` and report the outcome."""
    request = WorktreeRequest.from_path(target_path)

    if verbose:
        print(f"Working in: {manager.cwd}")
        print(f"Branch name: {request.branch_name}")

    paths = list(manager.config.copy_extras)
    paths.extend(p for p in (extra_paths or []) if p not in paths)

    report = manager.run(request, paths)

    if report.errors:
        print(f"Finished with {len(report.errors)} problem(s):")
        for error in report.errors:
            print(f"  {error}")
    else:
        print(f"Worktree '{request.branch_name}' is ready at {report.target}")

    if manager.config.cd_to_new_worktree and cd_file and report.worktree.usable:
        Path(cd_file).write_text(f"{report.target}\n")
        print(f"switching to {report.target} (absolute path for: {target_path})")

    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gitmaketree',
        description='Create a git worktree linked to its parent repository',
        epilog=USAGE_EPILOG
    )
    parser.add_argument('path', help='Path for the new worktree')
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    parser.add_argument(
        '--copy',
        action='append',
        default=[],
        metavar='PATH',
        help='Copy PATH into the new worktree (repeatable, added to configured extras)'
    )
    parser.add_argument(
        '--overwrite',
        choices=OVERWRITE_POLICIES,
        help='Overwrite copied files silently or ask for each one'
    )
    parser.add_argument(
        '--no-cd',
        action='store_true',
        help='Do not switch to the new worktree afterwards'
    )
    parser.add_argument(
        '--cd-file',
        default=os.environ.get(CD_FILE_ENV_VAR),
        metavar='FILE',
        help='Write the new worktree path to FILE for the shell function to cd into'
    )
    parser.add_argument('--config', metavar='FILE', help='Configuration file to use')
    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Show detailed output'
    )
    parser.add_argument('--debug', action='store_true', help='Show debug output')
    return parser


def main(args: List[str]) -> int:
    """Main entry point for the create command."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        config = load_config(parsed_args.config)
        if parsed_args.overwrite:
            config.overwrite = parsed_args.overwrite
        if parsed_args.no_cd:
            config.cd_to_new_worktree = False

        manager = WorktreeManager(config)
        return make_tree(
            manager,
            parsed_args.path,
            parsed_args.copy,
            parsed_args.cd_file,
            parsed_args.verbose
        )
    except UserAbortError as e:
        print(str(e), file=sys.stderr)
        return 1
    except InvalidNameError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1
    except GitMakeTreeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        if parsed_args.verbose or parsed_args.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
