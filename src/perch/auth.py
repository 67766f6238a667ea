"""Auth state and auth guards.

Guards consult an ``AuthGate``: anything exposing ``is_authenticated``,
``current_user_id``, and an async ``load_current_user()``. ``AuthState`` is
the in-memory implementation; the current user id lives only in process
memory and is gone when the client exits.

Usage::

    from perch.auth import AuthState, anonymous_only, login_required

    auth = AuthState(load_user=api.load_user)   # async (id: str) -> User | None
    auth.login("u-42")

    tree = RouteTree(
        route("login", guard=anonymous_only()),
        route("teams", ..., guard=login_required()),
    )
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from urllib.parse import quote

if TYPE_CHECKING:
    from perch.navigation.hooks import GuardContext

logger = logging.getLogger("perch.auth")

# ---------------------------------------------------------------------------
# User protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class User(Protocol):
    """Minimal user protocol.

    Any object with ``id`` and ``is_authenticated`` satisfies this.
    Applications bring their own user model.
    """

    @property
    def id(self) -> str: ...

    @property
    def is_authenticated(self) -> bool: ...


@dataclass(frozen=True, slots=True)
class AnonymousUser:
    """Sentinel for a client with nobody logged in.

    Returned by ``AuthState.current_user`` when no user is loaded, so
    callers never need a null check.
    """

    id: str = ""
    is_authenticated: bool = False


@dataclass(frozen=True, slots=True)
class UserRecord:
    """A user loaded from the API. ``attributes`` holds the decoded JSON."""

    id: str
    attributes: dict[str, Any] = field(default_factory=dict)
    is_authenticated: bool = True


_ANONYMOUS = AnonymousUser()


@runtime_checkable
class AuthGate(Protocol):
    """Auth capability consulted by guards."""

    @property
    def is_authenticated(self) -> bool: ...

    @property
    def current_user_id(self) -> str | None: ...

    async def load_current_user(self) -> User | None: ...


# ---------------------------------------------------------------------------
# In-memory auth state
# ---------------------------------------------------------------------------


class AuthState:
    """In-memory auth state for one client.

    Attributes:
        load_user: Async callback resolving a user id to a user, or ``None``
            when the id no longer exists. Without it, ``load_current_user()``
            is a no-op that returns ``None``.
    """

    __slots__ = ("_user", "_user_id", "load_user")

    def __init__(self, load_user: Callable[[str], Awaitable[User | None]] | None = None) -> None:
        self.load_user = load_user
        self._user_id: str | None = None
        self._user: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    @property
    def current_user_id(self) -> str | None:
        return self._user_id

    @property
    def current_user(self) -> User:
        """The loaded user, or ``AnonymousUser`` before ``load_current_user()``."""
        return self._user if self._user is not None else _ANONYMOUS

    def login(self, user_id: str) -> None:
        """Record *user_id* as logged in. Discards any previously loaded user."""
        if not user_id:
            msg = "login() requires a non-empty user id."
            raise ValueError(msg)
        self._user_id = user_id
        self._user = None
        logger.debug("Logged in as %s", user_id)

    def logout(self) -> None:
        self._user_id = None
        self._user = None
        logger.debug("Logged out")

    async def load_current_user(self) -> User | None:
        """Load the logged-in user through ``load_user``.

        An id that no longer resolves to a user logs the client out.
        Errors from ``load_user`` propagate unchanged.
        """
        user_id = self._user_id
        if user_id is None or self.load_user is None:
            return None
        user = await self.load_user(user_id)
        if self._user_id != user_id:
            # Logged out or switched user while the load was in flight
            return None
        if user is None:
            logger.info("User %s no longer exists; logging out", user_id)
            self.logout()
            return None
        self._user = user
        return user


# ---------------------------------------------------------------------------
# Guard factories
# ---------------------------------------------------------------------------


def login_required(
    login_path: str | None = None,
    *,
    remember_target: bool = True,
) -> Callable[[GuardContext], None]:
    """Guard that redirects unauthenticated navigation to *login_path*.

    Without *login_path*, ``AppConfig.login_path`` of the running resolver is
    used. With *remember_target*, the original path is appended as ``next=``::

        route("teams", guard=login_required())   # /teams -> /login?next=%2Fteams
    """

    def login_required_guard(ctx: GuardContext) -> None:
        if ctx.auth.is_authenticated:
            return
        target = login_path or ctx.config.login_path
        if remember_target:
            separator = "&" if "?" in target else "?"
            ctx.redirect(f"{target}{separator}next={quote(ctx.path, safe='')}")
        ctx.redirect(target)

    return login_required_guard


def anonymous_only(home_path: str | None = None) -> Callable[[GuardContext], None]:
    """Guard that sends already-authenticated users to *home_path*.

    Used on the login route so a logged-in user never sees the form.
    Defaults to ``AppConfig.home_path``.
    """

    def anonymous_only_guard(ctx: GuardContext) -> None:
        if ctx.auth.is_authenticated:
            ctx.redirect(home_path or ctx.config.home_path)

    return anonymous_only_guard


def preload_current_user() -> Callable[[GuardContext], Awaitable[None]]:
    """Guard that awaits ``auth.load_current_user()`` before child hooks run.

    Child guards and models can then rely on the user being loaded.
    """

    async def preload_current_user_guard(ctx: GuardContext) -> None:
        await ctx.auth.load_current_user()

    return preload_current_user_guard
