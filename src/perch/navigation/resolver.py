"""Transition resolver.

Resolves a target path into a committed chain of models by walking the
matched route chain root to leaf:

    1. Bump the generation and create the transition (it becomes current)
    2. Match the path against the route tree
    3. For each depth: run the guard, then the model hook
    4. After every hook, abandon the transition if a newer one started
    5. Commit the models to the renderer

A guard or model hook may redirect; the transition then ends as
REDIRECTED and a fresh navigation runs for the new path, up to
``AppConfig.max_redirects`` times per ``navigate()`` call.

Stale transitions end silently: nothing is rendered and no error is
surfaced, even if their in-flight hook later fails.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import anyio

from perch._internal.invoke import invoke
from perch.auth import AuthState
from perch.config import AppConfig
from perch.errors import HookTimeoutError, RedirectLoopError, RouteNotFoundError
from perch.navigation.hooks import GuardContext, ModelContext, RedirectRequested
from perch.navigation.render import NullRenderer
from perch.navigation.transition import NavigationContext, Outcome, Transition, TransitionStatus

if TYPE_CHECKING:
    from perch.auth import AuthGate
    from perch.data.source import DataSource
    from perch.navigation.hooks import HookContext
    from perch.navigation.render import Renderer
    from perch.routing.route import RouteNode
    from perch.routing.tree import RouteTree

logger = logging.getLogger("perch.navigation")


class StaleTransitionAbort(Exception):  # noqa: N818
    """Internal signal: the transition was superseded. Never surfaced."""


class Resolver:
    """Drives transitions over a route tree.

    Usage::

        resolver = Resolver(tree, renderer=view, auth=auth, data=api)
        outcome = await resolver.navigate("/teams/gh/prs")
        if outcome.ok:
            team, channel = outcome.models[1:]

    One resolver serves every navigation of a client; its
    ``NavigationContext`` decides which transition is current.
    """

    __slots__ = ("_auth", "_config", "_context", "_data", "_renderer", "_tree")

    def __init__(
        self,
        tree: RouteTree,
        *,
        renderer: Renderer | None = None,
        auth: AuthGate | None = None,
        data: DataSource | None = None,
        context: NavigationContext | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self._tree = tree
        self._config = config or AppConfig()
        self._renderer = renderer or NullRenderer()
        self._auth = auth or AuthState()
        self._data = data
        self._context = context or NavigationContext(self._config.history_size)

    @property
    def context(self) -> NavigationContext:
        return self._context

    @property
    def tree(self) -> RouteTree:
        return self._tree

    async def navigate(self, target_path: str) -> Outcome:
        """Navigate to *target_path* and return the outcome.

        Never raises for navigation failures: the error is delivered to the
        renderer and carried on the returned ``Outcome`` (use
        ``Outcome.raise_for_status()`` to re-raise it). A navigation that
        was superseded returns an outcome with status ``STALE``.
        """
        return await self._run(target_path, (target_path,))

    # -- Transition driver --

    async def _run(self, target_path: str, redirect_chain: tuple[str, ...]) -> Outcome:
        transition = self._context.begin(target_path, redirect_chain)
        logger.debug(
            "Transition %d to %r started", transition.generation, target_path,
        )

        try:
            transition.match = self._tree.match(target_path)
        except RouteNotFoundError as exc:
            return self._fail(transition, exc)

        try:
            await self._walk(transition)
        except StaleTransitionAbort:
            return self._abandon(transition)
        except anyio.get_cancelled_exc_class():
            # The caller cancelled the navigate() task itself
            self._abandon(transition)
            raise
        except RedirectRequested as redirect:
            if not self._context.is_current(transition):
                return self._abandon(transition)
            return await self._redirect(transition, redirect.path)
        except Exception as exc:
            if not self._context.is_current(transition):
                return self._abandon(transition)
            return self._fail(transition, exc)

        self._context.settle(transition, TransitionStatus.COMMITTED)
        logger.debug(
            "Transition %d to %r committed %d model(s)",
            transition.generation, target_path, len(transition.resolved_models),
        )
        self._renderer.commit(transition.models)
        return Outcome.from_transition(transition)

    async def _walk(self, transition: Transition) -> None:
        """Run guards and model hooks root to leaf, one at a time."""
        for depth, link in enumerate(transition.matched_chain):
            node = link.node

            if node.guard is not None:
                guard_ctx = GuardContext(
                    path=transition.target_path,
                    depth=depth,
                    params=link.params,
                    auth=self._auth,
                    data=self._data,
                    config=self._config,
                )
                await self._call_hook(transition, node, node.guard, guard_ctx)
                self._checkpoint(transition)

            value: Any = None
            if node.model is not None:
                model_ctx = ModelContext(
                    path=transition.target_path,
                    depth=depth,
                    params=link.params,
                    auth=self._auth,
                    data=self._data,
                    config=self._config,
                    parent_model=transition.resolved_models[depth - 1] if depth else None,
                )
                value = await self._call_hook(transition, node, node.model, model_ctx)
                self._checkpoint(transition)

            transition.resolved_models.append(value)

    async def _call_hook(
        self,
        transition: Transition,
        node: RouteNode,
        hook: Any,
        ctx: HookContext,
    ) -> Any:
        timeout = self._config.hook_timeout
        if timeout is None:
            return await invoke(hook, ctx)
        with anyio.move_on_after(timeout):
            return await invoke(hook, ctx)
        raise HookTimeoutError(transition.target_path, node.segment, timeout)

    def _checkpoint(self, transition: Transition) -> None:
        """Abort unless *transition* is still the current one."""
        if not self._context.is_current(transition):
            raise StaleTransitionAbort

    # -- Terminal states --

    async def _redirect(self, transition: Transition, path: str) -> Outcome:
        chain = (*transition.redirect_chain, path)
        limit = self._config.max_redirects
        if len(chain) - 1 > limit:
            return self._fail(transition, RedirectLoopError(chain, limit))

        self._context.settle(transition, TransitionStatus.REDIRECTED, redirected_to=path)
        logger.debug(
            "Transition %d to %r redirected to %r",
            transition.generation, transition.target_path, path,
        )
        return await self._run(path, chain)

    def _fail(self, transition: Transition, error: Exception) -> Outcome:
        self._context.settle(transition, TransitionStatus.FAILED, error=error)
        logger.warning(
            "Transition %d to %r failed: %s: %s",
            transition.generation, transition.target_path, type(error).__name__, error,
        )
        self._renderer.fail(error)
        return Outcome.from_transition(transition)

    def _abandon(self, transition: Transition) -> Outcome:
        # begin() already settled it when the newer transition started
        if transition.status is TransitionStatus.PENDING:
            self._context.settle(transition, TransitionStatus.STALE)
        logger.debug(
            "Transition %d to %r abandoned as stale",
            transition.generation, transition.target_path,
        )
        return Outcome.from_transition(transition)
