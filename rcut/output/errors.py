"""Error presentation utilities.

Centralized error formatting for consistent UX. Every release failure
exits with ``ErrorCode.FAILURE``; the kind only changes what is printed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rcut.output.console import Style
from rcut.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from rcut.output.console import ConsoleProtocol

__all__ = ["print_release_error"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print release error to console with appropriate formatting."""
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    if error.before_mutation:
        console.print("the repository was not modified", Style.DIM)
