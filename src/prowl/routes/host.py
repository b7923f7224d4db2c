"""Host server adapters.

The registrar needs only two things from a server: a way to bind a handler
at ``(method, url_path)`` and a "not found" reply for routes whose file has
been removed.  ``ChirpHost`` provides both on top of a chirp ``App``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

from prowl.routes.paths import to_chirp_path

if TYPE_CHECKING:
    from chirp import App
    from chirp.http.request import Request

# Methods whose request body is validated instead of the query string
_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

NOT_FOUND_BODY: dict[str, str] = {"error": "Route not found"}


class Host(Protocol):
    """What the registrar requires from an HTTP server."""

    def route(
        self,
        method: str,
        url_path: str,
        schema: object | None,
        handler: Callable[..., Any],
    ) -> None:
        """Bind *handler* at ``(method, url_path)``; ``:name`` marks parameters."""
        ...

    def not_found(self, url_path: str) -> Any:
        """Return the response for a bound route whose source was removed."""
        ...


class ChirpHost:
    """Bind routes into a chirp ``App``.

    Chirp compiles its router when the app freezes (first request or
    ``app.run()``), so every ``route()`` call must happen before that.
    Schemas are chirp validation rule mappings (``{field: [validators]}``)
    applied to the query string for GET/HEAD and to the form or JSON body
    otherwise; failures answer 422 with the error mapping.

    """

    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    def route(
        self,
        method: str,
        url_path: str,
        schema: object | None,
        handler: Callable[..., Any],
    ) -> None:
        endpoint = handler if schema is None else _validated(handler, schema)
        self.app.route(
            to_chirp_path(url_path),
            methods=[method],
            name=f"prowl:{method}:{url_path}",
            referenced=True,
        )(endpoint)

    def not_found(self, url_path: str) -> Any:
        return dict(NOT_FOUND_BODY), 404


def _validated(handler: Callable[..., Any], schema: object) -> Callable[..., Any]:
    """Wrap *handler* so requests are checked against *schema* first."""
    from chirp.validation import validate

    # No annotations: chirp injects ``request`` by name.
    async def endpoint(request):  # noqa: ANN001, ANN202
        data = await _request_data(request)
        result = validate(data, schema)  # type: ignore[arg-type]
        if not result:
            return {"errors": result.errors}, 422
        return await handler(request)

    return endpoint


async def _request_data(request: Request) -> Mapping[str, str]:
    if request.method not in _BODY_METHODS:
        return request.query
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        payload = await request.json()
        if not isinstance(payload, dict):
            return {}
        return {k: str(v) for k, v in payload.items()}
    return await request.form()
