"""rcut - release candidate cutter."""

__version__ = "0.1.0"
