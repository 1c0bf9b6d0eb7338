"""specreq -- Turn OpenAPI 3.x server entries into ready-to-use request descriptors.

This package parses an OpenAPI specification (JSON or YAML) into frozen
Pydantic models and resolves any of its ``servers`` into a
:class:`~specreq.models.RequestDescriptor` -- scheme, host, port and base
path -- that an HTTP client can consume. Nothing is ever sent over the
network.

Typical workflow::

    from specreq import build_request, from_server, load

    spec = load("petstore.yaml")
    descriptor = from_server(spec.servers[0], {"env": "staging"})
    request = build_request(descriptor, "GET", "/pets")

Modules:
    models: Pydantic models shared across the entire package.
    exceptions: Exception hierarchy for load and build failures.
    parser: Loading, validation, and serialisation of spec documents.
    client: Server-to-descriptor resolution and httpx request building.
    cache: Explicit, caller-owned caching of loaded specs.
"""

from specreq.client import build_request, from_server, from_specification
from specreq.models import FormatHint, RequestDescriptor, Server, Specification
from specreq.parser import dump_spec, load, load_from_bytes

__version__ = "0.1.0"

__all__ = [
    "FormatHint",
    "RequestDescriptor",
    "Server",
    "Specification",
    "build_request",
    "dump_spec",
    "from_server",
    "from_specification",
    "load",
    "load_from_bytes",
]
