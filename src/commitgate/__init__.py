"""commitgate - local commit-quality gate for git hooks."""

__version__ = "0.3.0"
