"""Navigation: versioned transitions over the route tree.

The resolver runs each matched node's guard and model hook root to leaf,
follows redirects, and drops superseded transitions without side effects.
"""

from perch.navigation.hooks import (
    GuardContext,
    HookContext,
    ModelContext,
    RedirectRequested,
    chain_guards,
)
from perch.navigation.render import NullRenderer, Renderer
from perch.navigation.resolver import Resolver
from perch.navigation.transition import NavigationContext, Outcome, Transition, TransitionStatus

__all__ = [
    "GuardContext",
    "HookContext",
    "ModelContext",
    "NavigationContext",
    "NullRenderer",
    "Outcome",
    "RedirectRequested",
    "Renderer",
    "Resolver",
    "Transition",
    "TransitionStatus",
    "chain_guards",
]
