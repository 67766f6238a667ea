"""Perch: client-side navigation and notification state for a team chat app.

Resolves navigation paths through a tree of routes, running auth guards and
async model hooks root to leaf, and keeps a shared list of notifications
that evict themselves after a fixed time.

Basic usage::

    from perch import App, RouteTree, route
    from perch.auth import login_required

    async def team_model(ctx):
        return await ctx.data.fetch_json(f"/api/teams/{ctx.params['teamId']}")

    tree = RouteTree(
        route("login"),
        route("teams", route(":teamId", model=team_model), guard=login_required()),
    )

    app = App(tree)
    outcome = await app.navigate("/teams/gh")
    app.notify("Welcome back", "success")
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HttpStatusError",
    "NavigationContext",
    "NetworkError",
    "Notification",
    "Notifications",
    "Outcome",
    "PerchError",
    "RedirectLoopError",
    "Resolver",
    "RouteNotFoundError",
    "RouteTree",
    "Severity",
    "TransitionStatus",
    "route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name == "AppConfig":
        from perch.config import AppConfig

        return AppConfig

    if name in ("RouteTree", "route"):
        from perch import routing as _routing

        return getattr(_routing, name)

    if name in ("NavigationContext", "Outcome", "Resolver", "TransitionStatus"):
        from perch import navigation as _navigation

        return getattr(_navigation, name)

    if name in ("Notification", "Notifications", "Severity"):
        from perch import notifications as _notifications

        return getattr(_notifications, name)

    if name in (
        "ConfigurationError",
        "HttpStatusError",
        "NetworkError",
        "PerchError",
        "RedirectLoopError",
        "RouteNotFoundError",
    ):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
