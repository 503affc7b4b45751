"""Error codes for CLI exit status.

Release tooling is used interactively by a single operator, so the exit
status only distinguishes success from failure. The failure class (usage,
precondition, tool) is reported in the printed message, not the code.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the rcut command.

    These values are used as process exit codes and should remain stable.
    """

    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower()
