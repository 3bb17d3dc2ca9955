"""
Interactive confirmation.
"""

import re

_YES = re.compile(r'^[Yy]')


def confirm(question: str) -> bool:
    """Ask a ``[Y/N]`` question on the terminal; anything starting with y/Y is yes."""
    try:
        reply = input(f"{question} [Y/N]? ")
    except EOFError:
        return False
    return bool(_YES.match(reply.strip()))
