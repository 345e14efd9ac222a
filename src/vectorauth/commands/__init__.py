"""Built-in CLI sub-commands for vectorauth.

Each module defines Typer command functions that the root application in
:mod:`vectorauth.app` registers.
"""

from vectorauth.commands.robot import (
    certificate_command,
    find_command,
    login_command,
    refresh_command,
    validate_command,
)

__all__ = [
    "certificate_command",
    "find_command",
    "login_command",
    "refresh_command",
    "validate_command",
]
