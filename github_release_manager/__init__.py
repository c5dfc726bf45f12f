"""Release version resolution, release notes generation, and GitHub release publishing."""

__version__ = "0.1.0"
