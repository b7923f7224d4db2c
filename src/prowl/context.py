"""Request-scoped application state via ContextVar.

Route modules must not keep their own module-level data stores: a reload
would reset them.  Instead the application hands its state to
``RouteLoader(state=...)`` and handlers read it back during dispatch::

    from prowl.context import get_state

    async def handler(request):
        users = get_state().users
        ...

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. No locks needed.
"""

from contextvars import ContextVar
from typing import Any

state_var: ContextVar[Any] = ContextVar("prowl_state")
"""The owning loader's state. Set by the dispatch stub around each handler call."""


def get_state() -> Any:
    """Return the state object of the loader dispatching this request.

    Returns *None* when the loader was created without state.  Raises
    ``LookupError`` if called outside a dispatched handler.
    """
    return state_var.get()
