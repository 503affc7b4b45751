"""Release candidate workflow: plan, mutate, build, publish, announce."""

from rcut.services.release.errors import ReleaseError
from rcut.services.release.model import ReleaseOptions, ReleaseOutcome, ReleaseVersions
from rcut.services.release.service import cut_release, prepare_release
from rcut.services.release.session import ReleaseSession, open_session

__all__ = [
    "ReleaseError",
    "ReleaseOptions",
    "ReleaseOutcome",
    "ReleaseSession",
    "ReleaseVersions",
    "cut_release",
    "open_session",
    "prepare_release",
]
