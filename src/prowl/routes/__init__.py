"""Route discovery, loading, and binding.

Scans a ``routes/`` directory for Python modules, derives each module's URL
from its file location, and binds it into a host server through dispatch
stubs that always read the current descriptor from the registry.

Public API::

    from prowl.routes import RouteRegistry, Registrar, load_route, scan, translate

    routes_dir = Path("routes").resolve()
    registry = RouteRegistry()
    for path in scan(routes_dir):
        registry.put(path, load_route(path, routes_dir))
    Registrar(host, registry).bind_all()
"""

from prowl.routes.host import ChirpHost, Host
from prowl.routes.loader import RouteDescriptor, load_route
from prowl.routes.paths import to_chirp_path, to_relative_path, translate
from prowl.routes.registrar import Binding, Registrar
from prowl.routes.registry import RouteRegistry
from prowl.routes.scanner import is_route_file, scan

__all__ = [
    "Binding",
    "ChirpHost",
    "Host",
    "Registrar",
    "RouteDescriptor",
    "RouteRegistry",
    "is_route_file",
    "load_route",
    "scan",
    "to_chirp_path",
    "to_relative_path",
    "translate",
]
