"""Data access for model hooks.

``HttpDataSource`` fetches JSON over HTTP with httpx and maps failures to
``NetworkError`` / ``HttpStatusError``.
"""

from perch.data.source import DataSource, HttpDataSource

__all__ = ["DataSource", "HttpDataSource"]
