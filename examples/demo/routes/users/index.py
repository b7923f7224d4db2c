"""GET /users"""

from prowl.context import get_state

method = "GET"


async def handler(request):
    return {"users": list(get_state().users.values())}
