"""Routing: immutable route tree with exact root-to-leaf matching.

Route nodes are declared once at startup with ``route()`` and compiled
into a ``RouteTree`` that the resolver walks on every navigation.
"""

from perch.routing.route import ChainLink, RouteMatch, RouteNode, route
from perch.routing.tree import RouteInfo, RouteTree

__all__ = [
    "ChainLink",
    "RouteInfo",
    "RouteMatch",
    "RouteNode",
    "RouteTree",
    "route",
]
