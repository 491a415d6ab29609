"""remotegit: git history, blame and graph queries served from the GitHub API."""

__version__ = "0.1.0"
