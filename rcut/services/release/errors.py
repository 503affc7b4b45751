from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_input",
    "precondition_failed",
    "tag_exists",
    "tool_missing",
    "git_failed",
    "sign_failed",
    "checksum_failed",
    "dist_failed",
    "io_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    # Set when the run failed before its first commit.
    before_mutation: bool = False
