"""Resolve OpenAPI server entries into request descriptors.

A :class:`~specreq.models.Server` holds a URL *template*; this module
substitutes its ``{variables}``, checks the result is an absolute
``http``/``https`` URL, and splits it into a
:class:`~specreq.models.RequestDescriptor`. Every function here is pure:
nothing is cached and nothing is sent over the network.

Variable resolution order for each placeholder:

1. The caller's ``overrides[name]``.
2. The server variable's ``default``.
3. :class:`~specreq.exceptions.UnresolvedVariableError`.

A declared ``enum`` is enforced on whichever value wins.

:func:`build_request` is the final hop into an HTTP client library: it
combines a descriptor with a method and a relative path and returns an
unsent :class:`httpx.Request`.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

import httpx

from specreq.exceptions import (
    InvalidVariableValueError,
    MalformedUrlError,
    UnresolvedVariableError,
)
from specreq.models import BuildOptions, RequestDescriptor, Server, Specification

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{([^{}]+)\}")
_HOST_LABEL_RE = re.compile(r"^[a-z0-9_](?:[a-z0-9_-]{0,61}[a-z0-9_])?$")


def from_server(
    server: Server,
    overrides: Optional[Mapping[str, str]] = None,
    options: Optional[BuildOptions] = None,
) -> RequestDescriptor:
    """Resolve *server* into a :class:`~specreq.models.RequestDescriptor`.

    Args:
        server: A server entry from a loaded specification.
        overrides: Values for server variables, taking precedence over the
            declared defaults. Names the template does not use are ignored.
        options: Builder settings. Defaults to :class:`~specreq.models.BuildOptions`.

    Returns:
        A new, frozen descriptor.

    Raises:
        UnresolvedVariableError: A placeholder has no override and no default.
        InvalidVariableValueError: A value is outside the variable's ``enum``.
        MalformedUrlError: The substituted URL is relative, unparsable, names
            an invalid host, or uses a scheme outside
            ``options.allowed_schemes``.

    Example::

        spec = load("petstore.yaml")
        descriptor = from_server(spec.servers[0], {"env": "prod"})
        print(descriptor.url)
    """
    options = options or BuildOptions()
    overrides = dict(overrides or {})

    values = _resolve_variables(server, overrides)
    unused = sorted(set(overrides) - set(values))
    if unused:
        logger.debug("Ignoring overrides not used by %s: %s", server.url, ", ".join(unused))

    url = _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], server.url)
    descriptor = _split_url(url, options)
    logger.debug("Resolved server %s to %s", server.url, descriptor.url)
    return descriptor


def from_specification(
    spec: Specification,
    overrides: Optional[Mapping[str, str]] = None,
    options: Optional[BuildOptions] = None,
) -> list[RequestDescriptor]:
    """Resolve every server of *spec*, in document order.

    The same *overrides* are offered to each server; each server only uses
    the names its own template contains. Returns an empty list when the
    spec declares no servers. The first failing server raises.
    """
    return [from_server(server, overrides, options) for server in spec.servers or ()]


def build_request(
    descriptor: RequestDescriptor,
    method: str = "GET",
    path: str = "",
    **kwargs: Any,
) -> httpx.Request:
    """Combine *descriptor* with a method and path into an unsent request.

    Args:
        descriptor: The resolved server endpoint.
        method: HTTP method; case-insensitive.
        path: Path relative to the descriptor's ``base_path``, e.g.
            ``"/pets"``. Joined with exactly one ``/``.
        **kwargs: Forwarded to :class:`httpx.Request` (``params``,
            ``headers``, ``json``, ``content``, ...).

    Returns:
        An :class:`httpx.Request` ready to pass to ``httpx.Client.send``.
    """
    relative = path.lstrip("/")
    if relative:
        full_path = f"{descriptor.base_path.rstrip('/')}/{relative}"
    else:
        full_path = descriptor.base_path
    return httpx.Request(method.upper(), f"{descriptor.origin}{full_path}", **kwargs)


def _resolve_variables(server: Server, overrides: dict[str, str]) -> dict[str, str]:
    """Pick a value for every placeholder and enforce ``enum`` sets."""
    values: dict[str, str] = {}
    for name in server.placeholders():
        variable = server.variables.get(name)
        if name in overrides:
            value = str(overrides[name])
        elif variable is not None:
            value = variable.default
        else:
            raise UnresolvedVariableError(name)

        if variable is not None and variable.enum is not None and value not in variable.enum:
            raise InvalidVariableValueError(name, value, variable.enum)
        values[name] = value
    return values


def _split_url(url: str, options: BuildOptions) -> RequestDescriptor:
    """Split an absolute URL into descriptor fields and normalise the path.

    ``httpx.URL`` decides whether the URL parses at all. ``urlsplit`` is
    kept for the split itself because it preserves explicit default ports
    (``http://host:80``), which ``httpx.URL`` normalises away.
    """
    if any(ch.isspace() for ch in url):
        raise MalformedUrlError("Server URL contains whitespace", url)
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as exc:
        raise MalformedUrlError(f"Cannot parse server URL ({exc})", url) from exc

    if not parts.scheme or not parts.netloc:
        raise MalformedUrlError("Server URL is not absolute", url)
    scheme = parts.scheme.lower()
    if scheme not in options.allowed_schemes:
        raise MalformedUrlError(f"Unsupported scheme '{parts.scheme}'", url)
    if not parts.hostname:
        raise MalformedUrlError("Server URL has no host", url)
    if parts.username is not None or parts.password is not None:
        raise MalformedUrlError("Credentials in server URLs are not supported", url)
    if parts.query or parts.fragment:
        raise MalformedUrlError("Server URL must not carry a query or fragment", url)

    try:
        httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise MalformedUrlError(f"Cannot parse server URL ({exc})", url) from exc
    _check_host(parts.hostname, url)

    base_path = parts.path.rstrip("/") or "/"
    if not base_path.startswith("/"):
        base_path = f"/{base_path}"

    return RequestDescriptor(scheme=scheme, host=parts.hostname, port=port, base_path=base_path)


def _check_host(host: str, url: str) -> None:
    """Reject hosts with empty labels or characters DNS names cannot hold."""
    if ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError as exc:
            raise MalformedUrlError(f"Invalid IPv6 host ({exc})", url) from exc
        return

    try:
        ascii_host = host.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise MalformedUrlError(f"Invalid host name '{host}'", url) from exc

    # A single trailing dot marks a fully qualified name
    if ascii_host.endswith("."):
        ascii_host = ascii_host[:-1]
    for label in ascii_host.split("."):
        if not _HOST_LABEL_RE.match(label.lower()):
            raise MalformedUrlError(f"Invalid host name '{host}'", url)
