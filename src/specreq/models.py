"""Canonical Pydantic models shared across all specreq modules.

Every other module imports its data shapes from here. The models fall into
two groups:

**Option models** -- explicit, caller-supplied settings:
    :class:`LoadOptions`, :class:`BuildOptions`, and :class:`CacheConfig`.

**Document models** -- produced by the loader and consumed by the request
builder:
    :class:`ServerVariable`, :class:`Server`, :class:`Contact`,
    :class:`License`, :class:`Info`, :class:`Tag`, :class:`ExternalDoc`,
    :class:`Specification`, and the builder output :class:`RequestDescriptor`.

All document models are frozen Pydantic v2 models. Fields use snake_case
names with aliases matching the OpenAPI document keys, so
``model_dump(by_alias=True)`` yields a document that loads back into an
equal value.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    WrapSerializer,
)

_PLACEHOLDER_RE = re.compile(r"\{([^{}]*)\}")

_FROZEN = ConfigDict(frozen=True, populate_by_name=True)


# --- Frozen containers ---


def _mapping_key(key: Any) -> str:
    """Spell a YAML scalar key the way JSON would have to (``200`` -> ``"200"``)."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def deep_freeze(value: Any) -> Any:
    """Return *value* with every mapping made read-only and every list a tuple.

    Mapping keys are normalised to strings, so a tree parsed from YAML with
    unquoted keys equals the same tree parsed from JSON.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({_mapping_key(k): deep_freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(deep_freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of :func:`deep_freeze`: plain dicts and lists again."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


def _serialize_thawed(value: Any, handler: Any) -> Any:
    return handler(thaw(value))


def _read_only(value: dict[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(value)


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


# Opaque document subtree (``paths``, ``components``), frozen all the way down
FrozenTree = Annotated[
    dict[str, Any],
    BeforeValidator(deep_freeze),
    AfterValidator(_read_only),
    WrapSerializer(_serialize_thawed),
]


# --- Options ---


class FormatHint(str, enum.Enum):
    """Document format hint for :func:`~specreq.parser.loader.load_from_bytes`.

    ``AUTO`` tries JSON first and falls back to YAML.
    """

    AUTO = "auto"
    JSON = "json"
    YAML = "yaml"


class LoadOptions(BaseModel):
    """Settings applied while reading and validating a spec document."""

    max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Largest spec file accepted, in bytes"
    )
    strict_enum_default: bool = Field(
        default=True,
        description="Require a server variable's default to be one of its enum values",
    )


class BuildOptions(BaseModel):
    """Settings applied while resolving a server into a request descriptor."""

    allowed_schemes: tuple[str, ...] = Field(
        default=("http", "https"), description="URL schemes accepted in server URLs"
    )


class CacheConfig(BaseModel):
    """Settings for a caller-owned :class:`~specreq.cache.SpecCache`."""

    enabled: bool = Field(default=True, description="Enable spec caching")
    max_entries: int = Field(
        default=64, description="Entries kept before the oldest is evicted"
    )


# --- Document models ---


class ServerVariable(BaseModel):
    """A server URL template variable.

    The ``default`` is used when the caller supplies no override. When
    ``enum`` is set, every resolved value must be one of its members.
    """

    model_config = _FROZEN

    default: str
    enum: Optional[tuple[str, ...]] = None
    description: Optional[str] = None


FrozenVariables = Annotated[
    dict[str, ServerVariable],
    AfterValidator(_read_only),
    WrapSerializer(_serialize_thawed),
]


class Server(BaseModel):
    """One deployment endpoint from the spec's ``servers`` array.

    ``url`` is a template that may contain ``{name}`` placeholders, each
    backed by an entry in the read-only ``variables`` mapping.
    """

    model_config = _FROZEN

    url: str
    description: Optional[str] = None
    variables: FrozenVariables = Field(default_factory=_empty_mapping)

    def placeholders(self) -> list[str]:
        """Return placeholder names in order of first occurrence in ``url``."""
        return placeholder_names(self.url)


class Contact(BaseModel):
    """Contact details from the *Info Object*."""

    model_config = _FROZEN

    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None


class License(BaseModel):
    """License declared for the API."""

    model_config = _FROZEN

    name: Optional[str] = None
    url: Optional[str] = None


class Info(BaseModel):
    """API metadata from the spec's *Info Object*."""

    model_config = _FROZEN

    title: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    terms_of_service: Optional[str] = Field(default=None, alias="termsOfService")
    contact: Optional[Contact] = None
    license: Optional[License] = None


class Tag(BaseModel):
    """A top-level tag used to group operations."""

    model_config = _FROZEN

    name: str
    description: Optional[str] = None


class ExternalDoc(BaseModel):
    """A link to external documentation."""

    model_config = _FROZEN

    url: str
    description: Optional[str] = None


class Specification(BaseModel):
    """Complete parsed representation of an OpenAPI 3.x document.

    ``servers`` is ``None`` when the document has no ``servers`` key and an
    empty tuple when the key holds an empty array. ``paths`` and
    ``components`` are carried through as read-only trees (see
    :func:`deep_freeze`); :func:`thaw` turns one back into plain dicts.

    See Also:
        :func:`~specreq.parser.loader.load`: Build one from a file.
        :func:`~specreq.parser.dumper.dump_spec`: Serialise one back to text.
    """

    model_config = _FROZEN

    openapi_version: str = Field(alias="openapi")
    info: Optional[Info] = None
    servers: Optional[tuple[Server, ...]] = None
    paths: FrozenTree = Field(default_factory=_empty_mapping)
    components: Optional[FrozenTree] = None
    tags: Optional[tuple[Tag, ...]] = None
    external_docs: Optional[ExternalDoc] = Field(default=None, alias="externalDocs")


class RequestDescriptor(BaseModel):
    """A resolved server endpoint, independent of any HTTP client library.

    ``port`` is ``None`` when the server URL carries no explicit port;
    protocol defaults are left to the caller. ``base_path`` always starts
    with ``/`` and never ends with one unless it is the root.
    """

    model_config = ConfigDict(frozen=True)

    scheme: str
    host: str
    port: Optional[int] = Field(default=None, ge=0, le=65535)
    base_path: str = "/"

    @property
    def origin(self) -> str:
        """``scheme://host[:port]``, with IPv6 hosts in brackets."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        netloc = host if self.port is None else f"{host}:{self.port}"
        return f"{self.scheme}://{netloc}"

    @property
    def url(self) -> str:
        """Reassemble ``scheme://host[:port]base_path``."""
        return f"{self.origin}{self.base_path}"


def placeholder_names(template: str) -> list[str]:
    """Return the unique ``{name}`` placeholders of *template* in order."""
    seen: dict[str, None] = {}
    for match in _PLACEHOLDER_RE.finditer(template):
        seen.setdefault(match.group(1), None)
    return list(seen)
