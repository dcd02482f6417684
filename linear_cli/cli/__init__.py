"""CLI commands for linear-cli.

The CLI is built using Click with the entry point ``linear``
(:mod:`linear_cli.main`). Commands share a :class:`CliContext` on
``ctx.obj``.

Usage Examples:
    List your issues in the current cycle::

        $ linear issue list

    Show an issue as YAML::

        $ linear issue get ENG-123 -o yaml

    Move an issue to the next cycle::

        $ linear issue edit ENG-123 --cycle next

Module Structure:
    - context.py: CliContext, aliased groups, error reporting
    - issue.py: issue list/get/edit/worktree
    - user.py: user list/get
    - cache.py: cache clear
"""

from linear_cli.cli.cache import cache_group
from linear_cli.cli.issue import issue_group
from linear_cli.cli.user import user_group

__all__ = ["cache_group", "issue_group", "user_group"]
