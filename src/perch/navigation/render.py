"""Rendering sink protocol.

The resolver never renders anything itself. It hands committed model
chains and surfaced errors to a ``Renderer`` supplied by the UI layer.
"""

import logging
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger("perch.navigation")


@runtime_checkable
class Renderer(Protocol):
    """Receives the result of every non-stale navigation.

    ``commit`` gets the resolved models ordered root to leaf. ``fail`` gets
    the typed error of a failed navigation (``RouteNotFoundError``,
    ``RedirectLoopError``, ``NetworkError``, ``HttpStatusError``, or
    whatever a hook raised).
    """

    def commit(self, models: tuple[Any, ...]) -> None: ...

    def fail(self, error: BaseException) -> None: ...


class NullRenderer:
    """Renderer that only logs. Used when no UI is attached."""

    __slots__ = ()

    def commit(self, models: tuple[Any, ...]) -> None:
        logger.debug("Committed %d model(s) with no renderer attached", len(models))

    def fail(self, error: BaseException) -> None:
        logger.debug("Navigation failed with no renderer attached: %s", error)
