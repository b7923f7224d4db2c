"""GET /test2 — liveness probe with process uptime."""

import time

from prowl.context import get_state

method = "GET"


async def handler(request):
    return {
        "status": "ok",
        "uptime": round(time.monotonic() - get_state().started_at, 3),
    }
