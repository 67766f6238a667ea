"""Perch client facade.

Wires the route tree, auth state, data source, resolver, and notification
collection together behind the two calls the rest of the application makes:
``navigate(path)`` and ``notify(body, severity)``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from perch.auth import AuthState, UserRecord
from perch.config import AppConfig
from perch.data.source import HttpDataSource
from perch.errors import DataSourceError, HttpStatusError
from perch.navigation.resolver import Resolver
from perch.navigation.transition import NavigationContext
from perch.notifications.collection import Notifications
from perch.notifications.model import Severity

if TYPE_CHECKING:
    from perch.auth import AuthGate
    from perch.data.source import DataSource
    from perch.navigation.render import Renderer
    from perch.navigation.transition import Outcome, Transition
    from perch.notifications.clock import Clock
    from perch.notifications.collection import NotificationsView
    from perch.notifications.model import Notification
    from perch.routing.tree import RouteTree

logger = logging.getLogger("perch")


class App:
    """The perch client.

    Usage::

        from perch import App, AppConfig

        app = App(tree, AppConfig(api_base_url="https://chat.example.com"), renderer=view)
        async with app:
            app.auth.login("u-1")
            outcome = await app.navigate("/teams/gh/prs")

            async with app.notify_errors("Could not delete message"):
                await app.data.fetch_json("/api/messages/7", method="DELETE")

    Without an explicit *auth*, an ``AuthState`` is created whose
    ``load_current_user()`` fetches ``config.current_user_url`` from the
    data source. Without an explicit *data*, an ``HttpDataSource`` is created
    for ``config.api_base_url`` and closed on ``aclose()``.
    """

    __slots__ = ("_notifications", "_owns_data", "_resolver", "auth", "config", "data")

    def __init__(
        self,
        routes: RouteTree,
        config: AppConfig | None = None,
        *,
        renderer: Renderer | None = None,
        auth: AuthGate | None = None,
        data: DataSource | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        cfg = self.config

        self._owns_data = data is None
        self.data: DataSource = data or HttpDataSource(
            cfg.api_base_url, timeout=cfg.request_timeout,
        )
        self.auth: AuthGate = auth or AuthState(load_user=self._load_user)

        self._resolver = Resolver(
            routes,
            renderer=renderer,
            auth=self.auth,
            data=self.data,
            context=NavigationContext(cfg.history_size),
            config=cfg,
        )
        self._notifications = Notifications(
            clock,
            ttl_ms=cfg.notification_ttl_ms,
            enter_ms=cfg.notification_enter_ms,
            feed_size=cfg.notification_feed_size,
        )

    # -- Navigation --

    async def navigate(self, path: str) -> Outcome:
        """Resolve *path*; see ``Resolver.navigate``."""
        return await self._resolver.navigate(path)

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    @property
    def current_transition(self) -> Transition | None:
        return self._resolver.context.current

    # -- Notifications --

    def notify(self, body: str, severity: Severity | str = Severity.INFO) -> Notification:
        """Show *body* until the configured ttl elapses."""
        return self._notifications.notify(body, severity)

    def dismiss(self, notification: Notification) -> bool:
        return self._notifications.dismiss(notification)

    @property
    def notifications(self) -> NotificationsView:
        """Live read-only view for list consumers."""
        return self._notifications.view()

    @property
    def notification_collection(self) -> Notifications:
        return self._notifications

    @asynccontextmanager
    async def notify_errors(self, message: str) -> AsyncIterator[None]:
        """Turn a data source failure inside the block into an error notification.

        Only ``DataSourceError`` is caught; anything else propagates::

            async with app.notify_errors("Could not create channel"):
                await app.data.fetch_json("/api/channels", method="POST", json=payload)
        """
        try:
            yield
        except DataSourceError as exc:
            logger.warning("%s: %s", message, exc)
            self._notifications.notify(message, Severity.ERROR)

    # -- Auth --

    async def _load_user(self, user_id: str) -> UserRecord | None:
        url = self.config.current_user_url.format(user_id=user_id)
        try:
            payload = await self.data.fetch_json(url)
        except HttpStatusError as exc:
            if exc.status == 404:
                return None
            raise
        attributes = payload if isinstance(payload, dict) else {}
        return UserRecord(id=user_id, attributes=attributes)

    # -- Lifecycle --

    async def aclose(self) -> None:
        """Stop notification subscribers and close an owned data source."""
        self._notifications.close()
        if self._owns_data and isinstance(self.data, HttpDataSource):
            await self.data.aclose()

    async def __aenter__(self) -> App:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
