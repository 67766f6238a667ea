"""Arguments handed to guard and model hooks.

Each ``RouteNode`` may carry a ``guard`` and a ``model``. Both are plain
callables (sync or async) that receive one context object::

    async def require_team_member(ctx: GuardContext) -> None:
        if not ctx.auth.is_authenticated:
            ctx.redirect("/login")

    async def team_model(ctx: ModelContext) -> dict:
        return await ctx.data.fetch_json(f"/api/teams/{ctx.params['teamId']}")

Guards return nothing; a model hook's return value becomes the model at
its depth and the ``parent_model`` of the next hook down the chain.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NoReturn

from perch._internal.invoke import invoke
from perch.config import AppConfig

if TYPE_CHECKING:
    from perch.auth import AuthGate
    from perch.data.source import DataSource


class RedirectRequested(Exception):  # noqa: N818
    """Raised by ``redirect()`` to end the current transition.

    The resolver catches it, marks the transition ``REDIRECTED`` and starts
    a fresh navigation to ``path``. Hooks may also raise it directly.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(path)


@dataclass(frozen=True, slots=True)
class HookContext:
    """Fields shared by guard and model contexts.

    Attributes:
        path: Target path of the transition running this hook.
        depth: Depth of the hook's node in the matched chain (0 = top level).
        params: Params bound from the top of the chain down to this node.
        auth: The auth gate capability.
        data: The data source capability, if one is configured.
        config: Configuration of the resolver running the hook.
    """

    path: str
    depth: int
    params: Mapping[str, str]
    auth: AuthGate
    data: DataSource | None = None
    config: AppConfig = field(default_factory=AppConfig)

    def redirect(self, path: str) -> NoReturn:
        """Abandon this transition and navigate to *path* instead."""
        raise RedirectRequested(path)


@dataclass(frozen=True, slots=True)
class GuardContext(HookContext):
    """Context for a guard hook."""


@dataclass(frozen=True, slots=True)
class ModelContext(HookContext):
    """Context for a model hook.

    ``parent_model`` is the model resolved at ``depth - 1``, or ``None`` at
    the top of the chain or when the parent node has no model hook.
    """

    parent_model: Any = None


def chain_guards(*guards: Callable[..., Any]) -> Callable[[GuardContext], Awaitable[None]]:
    """Combine several guards into one that runs them in order.

    A route node carries a single guard; use this when it needs more::

        route("teams", guard=chain_guards(login_required(), preload_current_user()))
    """

    async def chained_guard(ctx: GuardContext) -> None:
        for guard in guards:
            await invoke(guard, ctx)

    return chained_guard
