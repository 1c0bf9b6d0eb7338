"""Validate a raw OpenAPI dictionary and convert it into a Specification.

The single public entry point is :func:`extract_spec`. Validation happens
here, during conversion, so that a :class:`~specreq.models.Specification`
that exists is always usable: nothing is deferred to the request builder.

Internally it delegates to private helpers that each handle one section of
the document:

* ``_validate_version`` -- the ``openapi`` field.
* ``_extract_servers`` -- the ``servers`` array, including server variables
  and the placeholder cross-check against each ``url``.
* ``_extract_info`` -- the ``info`` object.
* ``_extract_tags`` / ``_extract_external_docs`` -- documentation metadata.

Every violation raises :class:`~specreq.exceptions.SchemaViolationError`
with a field path such as ``servers[0].variables.env.default``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from specreq.exceptions import SchemaViolationError
from specreq.models import (
    Contact,
    ExternalDoc,
    Info,
    License,
    LoadOptions,
    Server,
    ServerVariable,
    Specification,
    Tag,
    placeholder_names,
)

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^3\.\d+\.\d+$")


def extract_spec(raw: dict[str, Any], options: Optional[LoadOptions] = None) -> Specification:
    """Build a :class:`~specreq.models.Specification` from a parsed document.

    Args:
        raw: The document as returned by the JSON/YAML parser.
        options: Loader settings. Defaults to :class:`~specreq.models.LoadOptions`.

    Returns:
        A frozen specification.

    Raises:
        SchemaViolationError: On the first structural rule the document breaks.
    """
    options = options or LoadOptions()
    version = _validate_version(raw)

    paths = raw.get("paths", {})
    if paths is None:
        paths = {}
    if not isinstance(paths, dict):
        raise SchemaViolationError("must be an object", "paths")
    for key in paths:
        if not isinstance(key, str):
            raise SchemaViolationError("path templates must be strings", f"paths.{key}")

    components = raw.get("components")
    if components is not None and not isinstance(components, dict):
        raise SchemaViolationError("must be an object", "components")

    spec = Specification(
        openapi_version=version,
        info=_extract_info(raw.get("info")),
        servers=_extract_servers(raw, options),
        paths=paths,
        components=components,
        tags=_extract_tags(raw.get("tags")),
        external_docs=_extract_external_docs(raw.get("externalDocs"), "externalDocs"),
    )
    logger.debug(
        "Extracted OpenAPI %s spec with %d server(s) and %d path(s)",
        version,
        len(spec.servers or ()),
        len(spec.paths),
    )
    return spec


def _validate_version(raw: dict[str, Any]) -> str:
    """Check the ``openapi`` field and return it."""
    if "swagger" in raw and "openapi" not in raw:
        raise SchemaViolationError(
            f"missing; Swagger {raw['swagger']} documents are not supported, "
            "only OpenAPI 3.x",
            "openapi",
        )
    if "openapi" not in raw:
        raise SchemaViolationError("required field is missing", "openapi")

    version = raw["openapi"]
    if not isinstance(version, str):
        # YAML turns an unquoted ``3.0`` into a float
        raise SchemaViolationError(
            f"must be a version string, got {type(version).__name__} {version!r}",
            "openapi",
        )
    if not _VERSION_RE.match(version):
        raise SchemaViolationError(
            f"unsupported version {version!r}, expected 3.x.y", "openapi"
        )
    return version


def _extract_servers(raw: dict[str, Any], options: LoadOptions) -> Optional[tuple[Server, ...]]:
    """Extract and validate the ``servers`` array.

    Returns ``None`` when the key is absent and an empty tuple when the
    array is empty, so callers can tell the two apart.
    """
    if "servers" not in raw or raw["servers"] is None:
        return None

    servers = raw["servers"]
    if not isinstance(servers, list):
        raise SchemaViolationError("must be an array", "servers")

    return tuple(
        _extract_server(entry, f"servers[{index}]", options)
        for index, entry in enumerate(servers)
    )


def _extract_server(entry: Any, where: str, options: LoadOptions) -> Server:
    if not isinstance(entry, dict):
        raise SchemaViolationError("must be an object", where)

    url = entry.get("url")
    if not isinstance(url, str) or not url.strip():
        raise SchemaViolationError("must be a non-empty string", f"{where}.url")

    description = entry.get("description")
    if description is not None and not isinstance(description, str):
        raise SchemaViolationError("must be a string", f"{where}.description")

    raw_vars = entry.get("variables") or {}
    if not isinstance(raw_vars, dict):
        raise SchemaViolationError("must be an object", f"{where}.variables")

    variables = {
        str(name): _extract_variable(value, f"{where}.variables.{name}", options)
        for name, value in raw_vars.items()
    }

    _check_placeholders(url, variables, where)

    return Server(url=url, description=description, variables=variables)


def _extract_variable(value: Any, where: str, options: LoadOptions) -> ServerVariable:
    if not isinstance(value, dict):
        raise SchemaViolationError("must be an object", where)

    if "default" not in value:
        raise SchemaViolationError("required field is missing", f"{where}.default")
    default = value["default"]
    if isinstance(default, bool) or not isinstance(default, (str, int, float)):
        raise SchemaViolationError("must be a string", f"{where}.default")
    # Unquoted YAML scalars such as ``8080`` arrive as numbers
    default = str(default)

    allowed = value.get("enum")
    if allowed is not None:
        if not isinstance(allowed, list) or not allowed:
            raise SchemaViolationError("must be a non-empty array", f"{where}.enum")
        if any(isinstance(v, (dict, list, bool)) or v is None for v in allowed):
            raise SchemaViolationError("must contain only strings", f"{where}.enum")
        allowed = tuple(str(v) for v in allowed)
        if options.strict_enum_default and default not in allowed:
            raise SchemaViolationError(
                f"default {default!r} is not one of the enum values", f"{where}.default"
            )

    description = value.get("description")
    if description is not None and not isinstance(description, str):
        raise SchemaViolationError("must be a string", f"{where}.description")

    return ServerVariable(default=default, enum=allowed, description=description)


def _check_placeholders(url: str, variables: dict[str, ServerVariable], where: str) -> None:
    """Every ``{name}`` in *url* must be declared in *variables*."""
    stripped = re.sub(r"\{[^{}]*\}", "", url)
    if "{" in stripped or "}" in stripped:
        raise SchemaViolationError("unbalanced '{' or '}' in URL template", f"{where}.url")

    for name in placeholder_names(url):
        if not name:
            raise SchemaViolationError("empty '{}' placeholder in URL template", f"{where}.url")
        if name not in variables:
            raise SchemaViolationError(
                f"placeholder '{{{name}}}' in url has no matching variable",
                f"{where}.variables.{name}",
            )


def _extract_info(info: Any) -> Optional[Info]:
    if info is None:
        return None
    if not isinstance(info, dict):
        raise SchemaViolationError("must be an object", "info")

    contact = info.get("contact")
    if contact is not None and not isinstance(contact, dict):
        raise SchemaViolationError("must be an object", "info.contact")
    license_info = info.get("license")
    if license_info is not None and not isinstance(license_info, dict):
        raise SchemaViolationError("must be an object", "info.license")

    return Info(
        title=_optional_str(info.get("title")),
        version=_optional_str(info.get("version")),
        description=_optional_str(info.get("description")),
        terms_of_service=_optional_str(info.get("termsOfService")),
        contact=Contact(
            name=_optional_str(contact.get("name")),
            url=_optional_str(contact.get("url")),
            email=_optional_str(contact.get("email")),
        )
        if contact is not None
        else None,
        license=License(
            name=_optional_str(license_info.get("name")),
            url=_optional_str(license_info.get("url")),
        )
        if license_info is not None
        else None,
    )


def _extract_tags(tags: Any) -> Optional[tuple[Tag, ...]]:
    if tags is None:
        return None
    if not isinstance(tags, list):
        raise SchemaViolationError("must be an array", "tags")

    result = []
    for index, tag in enumerate(tags):
        where = f"tags[{index}]"
        if not isinstance(tag, dict):
            raise SchemaViolationError("must be an object", where)
        if not isinstance(tag.get("name"), str):
            raise SchemaViolationError("must be a string", f"{where}.name")
        result.append(
            Tag(name=tag["name"], description=_optional_str(tag.get("description")))
        )
    return tuple(result)


def _extract_external_docs(docs: Any, where: str) -> Optional[ExternalDoc]:
    if docs is None:
        return None
    if not isinstance(docs, dict):
        raise SchemaViolationError("must be an object", where)
    if not isinstance(docs.get("url"), str):
        raise SchemaViolationError("must be a string", f"{where}.url")
    return ExternalDoc(url=docs["url"], description=_optional_str(docs.get("description")))


def _optional_str(value: Any) -> Optional[str]:
    """Coerce scalar metadata (e.g. an unquoted YAML ``version: 1.0``) to text."""
    return None if value is None else str(value)
