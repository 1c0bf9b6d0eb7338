"""Load OpenAPI specifications from a local file or an in-memory buffer.

This module handles all I/O for reading raw OpenAPI documents and turning
them into Python dictionaries. It supports both JSON and YAML with automatic
format detection, then hands the dictionary to
:func:`~specreq.parser.extractor.extract_spec` for validation and conversion.

The two public functions are:

* :func:`load` -- Read a spec file from disk and return a
  :class:`~specreq.models.Specification`.
* :func:`load_from_bytes` -- The same, for content already in memory.

Neither function caches anything; see :class:`~specreq.cache.SpecCache` for
an explicit, caller-owned cache.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from specreq.exceptions import SpecIOError, SpecParseError
from specreq.models import FormatHint, LoadOptions, Specification
from specreq.parser.extractor import extract_spec

logger = logging.getLogger(__name__)

_EXTENSION_HINTS = {
    ".json": FormatHint.JSON,
    ".yaml": FormatHint.YAML,
    ".yml": FormatHint.YAML,
}


def load(path: Union[str, Path], options: Optional[LoadOptions] = None) -> Specification:
    """Load an OpenAPI spec from a local file.

    The format is taken from the file extension (``.json``, ``.yaml``,
    ``.yml``); any other extension falls back to content-based detection.

    Args:
        path: Path to the spec file.
        options: Loader settings. Defaults to :class:`~specreq.models.LoadOptions`.

    Returns:
        The validated, immutable specification.

    Raises:
        SpecIOError: If the file is missing, unreadable, or too large.
        SpecParseError: If the content is not valid JSON or YAML.
        SchemaViolationError: If the document breaks an OpenAPI rule.
    """
    options = options or LoadOptions()
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecIOError(f"Spec file not found: {path}", path=str(path))

    try:
        size = file_path.stat().st_size
        if size > options.max_bytes:
            raise SpecIOError(
                f"Spec file {path} is {size} bytes, larger than the "
                f"{options.max_bytes} byte limit",
                path=str(path),
            )
        content = file_path.read_bytes()
    except OSError as exc:
        raise SpecIOError(f"Failed to read spec file {path}: {exc}", path=str(path)) from exc

    hint = _EXTENSION_HINTS.get(file_path.suffix.lower(), FormatHint.AUTO)
    logger.debug("Read %d bytes from %s (format hint: %s)", len(content), path, hint.value)
    return load_from_bytes(content, hint=hint, options=options)


def load_from_bytes(
    content: Union[bytes, str],
    hint: FormatHint = FormatHint.AUTO,
    options: Optional[LoadOptions] = None,
) -> Specification:
    """Load an OpenAPI spec from in-memory content.

    Args:
        content: UTF-8 encoded document bytes, or an already decoded string.
        hint: Format of *content*. ``AUTO`` tries JSON, then YAML.
        options: Loader settings. Defaults to :class:`~specreq.models.LoadOptions`.

    Returns:
        The validated, immutable specification.

    Raises:
        SpecParseError: If the content cannot be decoded or parsed, or is
            larger than ``options.max_bytes``.
        SchemaViolationError: If the document breaks an OpenAPI rule.
    """
    options = options or LoadOptions()
    size = len(content) if isinstance(content, bytes) else len(content.encode("utf-8"))
    if size > options.max_bytes:
        raise SpecParseError(
            f"Spec content is {size} bytes, over the {options.max_bytes} byte limit"
        )
    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise SpecParseError(f"Spec is not valid UTF-8: {exc}") from exc
    else:
        text = content

    if not text.strip():
        raise SpecParseError("Spec document is empty")

    raw = _parse_content(text, FormatHint(hint))
    return extract_spec(raw, options)


def _parse_content(content: str, hint: FormatHint) -> dict[str, Any]:
    """Parse content as JSON or YAML into a dictionary.

    JSON is tried first unless the hint says YAML: valid JSON is also valid
    YAML, but the JSON parser is stricter and faster. With an explicit JSON
    hint the YAML fallback is skipped.

    Raises:
        SpecParseError: If the content cannot be parsed, or the root is not
            a mapping. Carries the line/column reported by the parser.
    """
    json_error: Optional[json.JSONDecodeError] = None

    if hint != FormatHint.YAML:
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == FormatHint.JSON:
                raise SpecParseError(
                    f"Invalid JSON: {exc.msg}", line=exc.lineno, column=exc.colno
                ) from exc
            json_error = exc
        else:
            logger.debug("Parsed spec as JSON")
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        line, column = _yaml_position(exc)
        if json_error is not None and content.lstrip().startswith(("{", "[")):
            # Content looks like JSON, so the JSON diagnostic is the useful one
            raise SpecParseError(
                f"Failed to parse spec as JSON or YAML: {json_error.msg}",
                line=json_error.lineno,
                column=json_error.colno,
            ) from exc
        raise SpecParseError(
            f"Invalid YAML: {_yaml_problem(exc)}", line=line, column=column
        ) from exc

    logger.debug("Parsed spec as YAML")
    return _require_mapping(result)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        got = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {got})")
    return result


def _yaml_position(exc: yaml.YAMLError) -> tuple[Optional[int], Optional[int]]:
    """Return the 1-based (line, column) of a PyYAML error, if it has one."""
    mark = getattr(exc, "problem_mark", None) or getattr(exc, "context_mark", None)
    if mark is None:
        return None, None
    return mark.line + 1, mark.column + 1


def _yaml_problem(exc: yaml.YAMLError) -> str:
    problem = getattr(exc, "problem", None)
    return problem if problem else str(exc).splitlines()[0]
