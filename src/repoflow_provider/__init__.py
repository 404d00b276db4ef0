"""repoflow provider - workspace and repository data sources for repoflow."""

from __future__ import annotations

__version__ = "0.1.0"
