"""Shared type aliases used across perch modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Decoded JSON document as returned by a data source
JsonValue: TypeAlias = dict[str, Any] | list[Any] | str | int | float | bool | None

# Guard hook: receives a GuardContext, may be sync or async, result ignored
GuardHook: TypeAlias = Callable[..., Any]

# Model hook: receives a ModelContext, returns (or awaits to) the model value
ModelHook: TypeAlias = Callable[..., Any]
