"""GET /cache — every live cache entry."""

from prowl.context import get_state

method = "GET"


async def handler(request):
    cache = get_state().cache
    return {"keys": {key: cache.get(key) for key in cache.keys("cache:")}}
