"""RouteNode, ChainLink, and RouteMatch frozen dataclasses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from perch._internal.types import GuardHook, ModelHook
from perch.errors import ConfigurationError

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def parse_segment(segment: str) -> str | None:
    """Validate a route segment and return its parameter name, if any.

    Examples::

        "teams"    -> None
        ":teamId"  -> "teamId"

    Raises ``ConfigurationError`` for empty segments, segments containing
    ``/``, and ``{param}`` / ``<param>`` placeholders from other routers.
    """
    if not segment:
        msg = "Route segments must be non-empty."
        raise ConfigurationError(msg)
    if "/" in segment:
        msg = (
            f"Route segment {segment!r} contains '/'. "
            "Nest routes with children instead of multi-segment names."
        )
        raise ConfigurationError(msg)
    if (segment.startswith("{") and segment.endswith("}")) or (
        segment.startswith("<") and segment.endswith(">")
    ):
        msg = (
            f"Route segment {segment!r} uses an unsupported placeholder. "
            f"Dynamic segments are written as ':name' (e.g. ':{segment[1:-1]}')."
        )
        raise ConfigurationError(msg)
    if segment.startswith(":"):
        name = segment[1:]
        if not name.isidentifier():
            msg = f"Dynamic segment {segment!r} needs an identifier after ':'."
            raise ConfigurationError(msg)
        return name
    return None


@dataclass(frozen=True, slots=True)
class RouteNode:
    """A frozen node of the route tree.

    Static:  ``teams``    (param_name=None)
    Dynamic: ``:teamId``  (param_name="teamId")

    Build nodes with ``route()`` rather than directly; it validates the
    segment and the children.
    """

    segment: str
    param_name: str | None = None
    children: Mapping[str, RouteNode] = field(default_factory=lambda: _EMPTY)
    guard: GuardHook | None = None
    model: ModelHook | None = None

    @property
    def is_dynamic(self) -> bool:
        return self.param_name is not None

    @property
    def dynamic_child(self) -> RouteNode | None:
        """The single dynamic child, if this node has one."""
        for child in self.children.values():
            if child.is_dynamic:
                return child
        return None


def route(
    segment: str,
    *children: RouteNode,
    guard: GuardHook | None = None,
    model: ModelHook | None = None,
) -> RouteNode:
    """Build a validated ``RouteNode``.

    Usage::

        teams = route(
            "teams",
            route(":teamId", route(":channelId", model=channel_model), model=team_model),
            guard=login_required(),
            model=teams_model,
        )

    Raises ``ConfigurationError`` on duplicate static children or more than
    one dynamic child.
    """
    param_name = parse_segment(segment)
    by_segment: dict[str, RouteNode] = {}
    dynamic: RouteNode | None = None
    for child in children:
        if child.segment in by_segment:
            msg = f"Duplicate child segment {child.segment!r} under {segment!r}."
            raise ConfigurationError(msg)
        if child.is_dynamic:
            if dynamic is not None:
                msg = (
                    f"Segment {segment!r} has two dynamic children "
                    f"({dynamic.segment!r}, {child.segment!r}); only one is allowed."
                )
                raise ConfigurationError(msg)
            dynamic = child
        by_segment[child.segment] = child
    return RouteNode(
        segment=segment,
        param_name=param_name,
        children=MappingProxyType(by_segment),
        guard=guard,
        model=model,
    )


@dataclass(frozen=True, slots=True)
class ChainLink:
    """One matched node and the params bound from the root down to it."""

    node: RouteNode
    params: Mapping[str, str]


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match, ordered root to leaf."""

    path: str
    chain: tuple[ChainLink, ...]

    @property
    def params(self) -> Mapping[str, str]:
        """All params bound by the match."""
        return self.chain[-1].params if self.chain else _EMPTY
