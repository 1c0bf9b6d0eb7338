"""Exception hierarchy for specreq.

All exceptions inherit from :class:`SpecreqError`, which carries a ``code``
attribute naming the failure category. Loading problems derive from
:class:`LoadError`; problems turning a server entry into a
:class:`~specreq.models.RequestDescriptor` derive from :class:`BuildError`.

Subclass hierarchy::

    SpecreqError
    +-- LoadError
    |   +-- SpecIOError                (io_failure)
    |   +-- SpecParseError             (parse_failure)
    |   +-- SchemaViolationError       (schema_violation)
    +-- BuildError
        +-- UnresolvedVariableError    (unresolved_variable)
        +-- InvalidVariableValueError  (invalid_variable_value)
        +-- MalformedUrlError          (malformed_url)

No function in the package returns a partially built value alongside one of
these errors.
"""

from __future__ import annotations

from typing import Optional, Sequence


class SpecreqError(Exception):
    """Base exception for all specreq errors.

    Every subclass sets a class-level ``code`` so callers can branch on the
    failure category without ``isinstance`` chains.

    Args:
        message: Human-readable error description.
    """

    code: str = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# --- Loading ---


class LoadError(SpecreqError):
    """Raised when a specification document cannot be turned into a :class:`~specreq.models.Specification`."""

    code = "load_error"


class SpecIOError(LoadError):
    """Raised when the spec file is missing, unreadable, or too large.

    Args:
        message: Human-readable error description.
        path: The offending filesystem path.
    """

    code = "io_failure"

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class SpecParseError(LoadError):
    """Raised when the document is not well-formed JSON or YAML.

    ``line`` and ``column`` are 1-based and only set when the underlying
    parser reports a position.
    """

    code = "parse_failure"

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        if line is not None:
            where = f"line {line}" if column is None else f"line {line}, column {column}"
            message = f"{message} ({where})"
        super().__init__(message)
        self.line = line
        self.column = column


class SchemaViolationError(LoadError):
    """Raised when a well-formed document breaks an OpenAPI structural rule.

    Args:
        message: Human-readable error description.
        field_path: Location of the offending field, e.g. ``servers[0].url``.
    """

    code = "schema_violation"

    def __init__(self, message: str, field_path: str):
        super().__init__(f"{field_path}: {message}")
        self.field_path = field_path


# --- Building ---


class BuildError(SpecreqError):
    """Raised when a server entry cannot be resolved into a request descriptor."""

    code = "build_error"


class UnresolvedVariableError(BuildError):
    """Raised when a ``{placeholder}`` has neither an override nor a default."""

    code = "unresolved_variable"

    def __init__(self, variable: str):
        super().__init__(
            f"Server variable '{variable}' has no override and no default value"
        )
        self.variable = variable


class InvalidVariableValueError(BuildError):
    """Raised when a resolved variable value is outside its declared ``enum``."""

    code = "invalid_variable_value"

    def __init__(self, variable: str, value: str, allowed: Sequence[str]):
        choices = ", ".join(repr(v) for v in allowed)
        super().__init__(
            f"Invalid value {value!r} for server variable '{variable}' "
            f"(allowed: {choices})"
        )
        self.variable = variable
        self.value = value
        self.allowed = tuple(allowed)


class MalformedUrlError(BuildError):
    """Raised when the substituted server URL is not an absolute http(s) URL."""

    code = "malformed_url"

    def __init__(self, message: str, url: str):
        super().__init__(f"{message}: {url!r}")
        self.url = url
