"""Immutable route tree with exact, backtracking path matching.

The tree is built once at startup from ``route()`` nodes and never
mutated, so it is safe to share between navigations without locking.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from urllib.parse import unquote

from perch.errors import RouteNotFoundError
from perch.routing.route import ChainLink, RouteMatch, RouteNode, route


def split_path(path: str) -> list[str]:
    """Split a navigation path into decoded segments.

    Query strings and fragments are ignored; empty segments (from leading,
    trailing, or doubled slashes) are dropped::

        "/teams/gh/prs"     -> ["teams", "gh", "prs"]
        "//teams/gh"        -> ["teams", "gh"]
        "/teams/a%20b?x=1"  -> ["teams", "a b"]

    The path is never parsed as a URL, so a leading ``//`` is not a host.
    """
    raw = path.split("#", 1)[0].split("?", 1)[0]
    return [unquote(part) for part in raw.split("/") if part]


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """Introspection record for one navigable pattern."""

    pattern: str
    depth: int
    guard: str | None
    model: str | None


def _hook_name(hook: object) -> str | None:
    if hook is None:
        return None
    return getattr(hook, "__name__", None) or type(hook).__name__


class RouteTree:
    """Compiled route tree.

    Usage::

        tree = RouteTree(
            route("login", guard=anonymous_only()),
            route("teams", route(":teamId", route(":channelId"))),
        )
        match = tree.match("/teams/gh/prs")
        [link.node.segment for link in match.chain]  # ["teams", ":teamId", ":channelId"]

    The root itself is implicit and not navigable; every match contains
    at least one node.
    """

    __slots__ = ("_root",)

    def __init__(self, *routes: RouteNode) -> None:
        # route() performs the duplicate / ambiguity checks
        self._root = route("__root__", *routes)

    @property
    def roots(self) -> tuple[RouteNode, ...]:
        """Top-level route nodes, in declaration order."""
        return tuple(self._root.children.values())

    def match(self, path: str) -> RouteMatch:
        """Match *path* against the tree.

        Static children are tried before the dynamic child at every level,
        backtracking when a branch cannot consume the whole path.

        Returns a ``RouteMatch`` on success.
        Raises ``RouteNotFoundError`` if no chain consumes every segment.
        """
        parts = split_path(path)
        if not parts:
            raise RouteNotFoundError(path)
        chain = self._match_node(self._root, parts, 0, {})
        if chain is None:
            raise RouteNotFoundError(path)
        return RouteMatch(path=path, chain=tuple(chain))

    def _match_node(
        self,
        node: RouteNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> list[ChainLink] | None:
        """Recursively match path parts below *node*."""
        if index == len(parts):
            return []

        part = parts[index]

        # 1. Static child (exact match)
        static = node.children.get(part)
        if static is not None and not static.is_dynamic:
            rest = self._match_node(static, parts, index + 1, params)
            if rest is not None:
                return [ChainLink(static, MappingProxyType(dict(params))), *rest]

        # 2. Dynamic child binds the segment value
        dynamic = node.dynamic_child
        if dynamic is not None:
            bound = {**params, dynamic.param_name or "": part}
            rest = self._match_node(dynamic, parts, index + 1, bound)
            if rest is not None:
                return [ChainLink(dynamic, MappingProxyType(bound)), *rest]

        return None

    def paths(self) -> list[RouteInfo]:
        """Return every navigable pattern, depth-first in declaration order.

        Useful for introspection and the ``perch routes`` command.
        """
        result: list[RouteInfo] = []
        for node in self._root.children.values():
            self._collect(node, "", 0, result)
        return result

    def _collect(self, node: RouteNode, prefix: str, depth: int, result: list[RouteInfo]) -> None:
        pattern = f"{prefix}/{node.segment}"
        result.append(
            RouteInfo(
                pattern=pattern,
                depth=depth,
                guard=_hook_name(node.guard),
                model=_hook_name(node.model),
            )
        )
        for child in node.children.values():
            self._collect(child, pattern, depth + 1, result)

