"""Call route hooks that may be sync or async.

A guard or model hook is a plain ``def`` or an ``async def``; the resolver
and ``chain_guards`` both go through ``invoke`` so neither has to care.
"""

import inspect
from typing import Any


async def invoke(hook: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *hook* and await the result if it's awaitable.

    ::

        def teams_model(ctx):                  # returned as-is
            return {"title": "Teams"}

        async def team_model(ctx):             # coroutine awaited here
            return await ctx.data.fetch_json(f"/api/teams/{ctx.params['teamId']}")
    """
    result = hook(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
