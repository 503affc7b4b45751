"""Service layer: the release workflow."""
