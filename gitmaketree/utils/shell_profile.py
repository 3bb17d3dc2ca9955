"""
Shell profile editing for ``gitmaketree install``.
"""

import os
import re
from pathlib import Path
from typing import Optional

BEGIN_MARKER = '# >>> gitmaketree >>>'
END_MARKER = '# <<< gitmaketree <<<'

_ALIAS_NAME = re.compile(r'^[A-Za-z_][A-Za-z0-9_-]*$')

_BLOCK_RE = re.compile(
    re.escape(BEGIN_MARKER) + r'.*?' + re.escape(END_MARKER) + r'\n?',
    re.DOTALL,
)

CD_FILE_ENV_VAR = 'GITMAKETREE_CD_FILE'

BLOCK_TEMPLATE = """{begin}
# cd into the physical path of a symbolic link instead of appending the link to $PWD
alias cd='cd -P'
{alias}() {{
    local cd_file rc
    cd_file="$(mktemp)"
    {env_var}="$cd_file" command {command} "$@"
    rc=$?
    if [ "$rc" -eq 0 ] && [ -s "$cd_file" ]; then
        builtin cd -P "$(cat "$cd_file")"
    fi
    rm -f "$cd_file"
    return "$rc"
}}
{end}
"""


def is_valid_alias(name: str) -> bool:
    return bool(_ALIAS_NAME.match(name))


def default_profile(shell: Optional[str] = None) -> Path:
    """~/.zshrc for zsh users, ~/.bashrc for everyone else."""
    if shell is None:
        shell = os.environ.get('SHELL', '')
    if shell.endswith('zsh'):
        return Path.home() / '.zshrc'
    return Path.home() / '.bashrc'


def render_block(alias: str, command: str = 'gitmaketree') -> str:
    return BLOCK_TEMPLATE.format(
        begin=BEGIN_MARKER,
        end=END_MARKER,
        alias=alias,
        command=command,
        env_var=CD_FILE_ENV_VAR,
    )


def strip_block(text: str) -> str:
    """Remove every marker-delimited gitmaketree block from ``text``."""
    return _BLOCK_RE.sub('', text)


def install_block(profile: Path, block: str) -> bool:
    """Replace any earlier block in ``profile`` with ``block``, appended at the end.

    Returns True when an earlier block was replaced.
    """
    profile = Path(profile).expanduser()
    original = profile.read_text() if profile.exists() else ''
    stripped = strip_block(original)
    replaced = stripped != original

    if stripped and not stripped.endswith('\n'):
        stripped += '\n'
    if stripped and not stripped.endswith('\n\n'):
        stripped += '\n'

    profile.parent.mkdir(parents=True, exist_ok=True)
    profile.write_text(stripped + block)
    return replaced
