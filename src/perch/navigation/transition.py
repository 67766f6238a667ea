"""Transition state, the navigation context, and navigation outcomes.

A ``Transition`` is one navigation attempt. The ``NavigationContext`` owns
the generation counter and the reference to the current transition; it is
created once per client and threaded through the resolver instead of
living in module globals.

Generation rule:
    ``begin()`` bumps the counter and installs the new transition in one
    synchronous step. Any transition whose generation is lower than the
    context's is stale forever, and the resolver abandons it at its next
    resumption point.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from perch.routing.route import ChainLink, RouteMatch


class TransitionStatus(Enum):
    """Lifecycle of a transition. Every status except PENDING is terminal."""

    PENDING = "pending"
    COMMITTED = "committed"
    REDIRECTED = "redirected"
    STALE = "stale"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self is not TransitionStatus.PENDING


@dataclass(slots=True, eq=False)
class Transition:
    """One navigation attempt, owned by the resolver for its lifetime.

    Attributes:
        target_path: The path being navigated to.
        generation: Monotonic number assigned by ``NavigationContext.begin``.
        redirect_chain: Every path visited by this navigation call so far,
            starting with the original target and ending with ``target_path``.
        match: The matched route chain, once matching succeeds.
        status: Current lifecycle status.
        resolved_models: Model values indexed by depth.
        error: The error that failed the transition, if any.
        redirected_to: Target of the redirect that ended the transition.
    """

    target_path: str
    generation: int
    redirect_chain: tuple[str, ...] = ()
    match: RouteMatch | None = None
    status: TransitionStatus = TransitionStatus.PENDING
    resolved_models: list[Any] = field(default_factory=list)
    error: BaseException | None = None
    redirected_to: str | None = None

    @property
    def matched_chain(self) -> tuple[ChainLink, ...]:
        return self.match.chain if self.match is not None else ()

    @property
    def models(self) -> tuple[Any, ...]:
        """Read-only snapshot of the models resolved so far."""
        return tuple(self.resolved_models)

    def settle(
        self,
        status: TransitionStatus,
        *,
        error: BaseException | None = None,
        redirected_to: str | None = None,
    ) -> None:
        """Move from PENDING to a terminal status.

        Raises ``RuntimeError`` if the transition already settled.
        """
        if self.status.terminal:
            msg = (
                f"Transition to {self.target_path!r} (generation {self.generation}) "
                f"is already {self.status.value}; cannot become {status.value}."
            )
            raise RuntimeError(msg)
        if not status.terminal:
            msg = "A transition can only settle into a terminal status."
            raise ValueError(msg)
        self.status = status
        self.error = error
        self.redirected_to = redirected_to


class NavigationContext:
    """Generation counter, current transition, and recent history.

    Create one per client and share it with the resolver::

        context = NavigationContext()
        resolver = Resolver(tree, context=context)

    Not thread-safe: all navigation runs on a single event loop, and
    ``begin()`` contains no suspension point.
    """

    __slots__ = ("_current", "_generation", "_history")

    def __init__(self, history_size: int = 50) -> None:
        self._generation = 0
        self._current: Transition | None = None
        self._history: deque[Transition] = deque(maxlen=history_size)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current(self) -> Transition | None:
        return self._current

    @property
    def history(self) -> tuple[Transition, ...]:
        """Settled transitions, oldest first."""
        return tuple(self._history)

    def begin(self, target_path: str, redirect_chain: tuple[str, ...] = ()) -> Transition:
        """Start a new transition and make it current.

        A still-pending previous transition is marked STALE immediately.
        """
        previous = self._current
        self._generation += 1
        transition = Transition(
            target_path=target_path,
            generation=self._generation,
            redirect_chain=redirect_chain or (target_path,),
        )
        self._current = transition
        if previous is not None and previous.status is TransitionStatus.PENDING:
            self.settle(previous, TransitionStatus.STALE)
        return transition

    def is_current(self, transition: Transition) -> bool:
        return transition.generation == self._generation

    def settle(
        self,
        transition: Transition,
        status: TransitionStatus,
        *,
        error: BaseException | None = None,
        redirected_to: str | None = None,
    ) -> None:
        """Settle *transition* and record it in the history."""
        transition.settle(status, error=error, redirected_to=redirected_to)
        self._history.append(transition)


@dataclass(frozen=True, slots=True)
class Outcome:
    """What a ``navigate()`` call produced.

    For a redirected navigation this describes the final transition of the
    redirect chain; ``redirects`` lists every path visited.
    """

    path: str
    status: TransitionStatus
    models: tuple[Any, ...] = ()
    error: BaseException | None = None
    redirects: tuple[str, ...] = ()

    @classmethod
    def from_transition(cls, transition: Transition) -> Outcome:
        return cls(
            path=transition.target_path,
            status=transition.status,
            models=transition.models if transition.status is TransitionStatus.COMMITTED else (),
            error=transition.error,
            redirects=transition.redirect_chain,
        )

    @property
    def ok(self) -> bool:
        return self.status is TransitionStatus.COMMITTED

    def raise_for_status(self) -> Outcome:
        """Re-raise the error of a failed outcome; return self otherwise."""
        if self.status is TransitionStatus.FAILED and self.error is not None:
            raise self.error
        return self
