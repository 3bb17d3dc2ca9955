"""
gitmaketree - create Git worktrees with parent/child links and ignore bookkeeping.

gitmaketree wraps ``git worktree add``: it checks the repository before
touching anything, links the new worktree and its parent to each other and
keeps both ``.gitignore`` files aware of those links.
"""

__version__ = "0.1.0"
__author__ = "gitmaketree"
