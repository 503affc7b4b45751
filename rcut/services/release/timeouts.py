from __future__ import annotations

# Signing may wait on a pinentry prompt.
GPG_TIMEOUT_SECONDS = 5 * 60.0

# SVN operations against the distribution store (mkdir, checkout, commit)
SVN_TIMEOUT_SECONDS = 10 * 60.0
