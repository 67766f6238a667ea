"""Perch exception hierarchy.

Shared across the route tree, resolver, data source, and notification
collection so every module raises and catches the same types.
"""


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when configuration or the route tree is invalid.

    Typically raised while building an ``AppConfig`` or a ``RouteTree``
    at startup, never during navigation.
    """


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


class NavigationError(PerchError):
    """Base for errors the resolver surfaces to the rendering layer."""

    def __init__(self, path: str, detail: str = "") -> None:
        self.path = path
        self.detail = detail
        super().__init__(detail or path)


class RouteNotFoundError(NavigationError):
    """No chain of route nodes matches the target path."""

    def __init__(self, path: str) -> None:
        super().__init__(path, f"No route matches {path!r}")


class RedirectLoopError(NavigationError):
    """A navigation followed more transitive redirects than allowed.

    ``chain`` holds every path visited, starting with the original target.
    """

    def __init__(self, chain: tuple[str, ...], limit: int) -> None:
        self.chain = chain
        self.limit = limit
        super().__init__(
            chain[0],
            f"Exceeded {limit} redirects: {' -> '.join(chain)}",
        )


class HookTimeoutError(NavigationError):
    """A guard or model hook did not finish within ``AppConfig.hook_timeout``."""

    def __init__(self, path: str, segment: str, timeout: float) -> None:
        self.segment = segment
        self.timeout = timeout
        super().__init__(path, f"Hook for segment {segment!r} timed out after {timeout}s")


# ---------------------------------------------------------------------------
# Data source
# ---------------------------------------------------------------------------


class DataSourceError(PerchError):
    """Base for failures raised by a data source."""


class NetworkError(DataSourceError):
    """Transport-level failure: DNS, connection refused, reset, timeout."""

    def __init__(self, url: str, detail: str = "") -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Network error fetching {url}: {detail}" if detail else url)


class HttpStatusError(DataSourceError):
    """The server answered with a non-2xx status."""

    def __init__(self, url: str, status: int, body: str = "") -> None:
        self.url = url
        self.status = status
        self.body = body
        super().__init__(f"{url} returned {status}")
