"""Import resolution: resolves ``"module:attribute"`` strings to route trees.

Accepts a ``RouteTree``, an ``App`` (its resolver's tree is used), or a
zero-argument factory returning either.
"""

import importlib

from perch.app import App
from perch.routing.tree import RouteTree


def resolve_tree(import_string: str) -> RouteTree:
    """Resolve an import string to a ``RouteTree``.

    When the attribute portion is omitted, defaults to ``"tree"``
    (e.g. ``"myapp.routes"`` resolves to ``myapp.routes.tree``).

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a ``RouteTree`` or ``App``.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "tree"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, (RouteTree, App)):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if isinstance(obj, App):
        return obj.resolver.tree
    if not isinstance(obj, RouteTree):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a RouteTree or App"
        raise TypeError(msg)
    return obj
