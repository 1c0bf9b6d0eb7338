"""Serialise a Specification back into an OpenAPI JSON or YAML document.

The output uses the document's own key names (``openapi``, ``externalDocs``,
``termsOfService``, ...) and omits unset optional fields, so loading the
dumped text yields a specification equal to the one that was dumped.
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from specreq.models import FormatHint, Specification


def spec_to_dict(spec: Specification) -> dict[str, Any]:
    """Return *spec* as a plain OpenAPI document dictionary."""
    return spec.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_spec(spec: Specification, fmt: FormatHint = FormatHint.YAML) -> str:
    """Serialise *spec* to text.

    Args:
        spec: The specification to serialise.
        fmt: ``JSON`` or ``YAML``. ``AUTO`` is treated as YAML.

    Returns:
        The document text, UTF-8 safe and ending with a newline.
    """
    document = spec_to_dict(spec)
    if FormatHint(fmt) == FormatHint.JSON:
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    return yaml.safe_dump(
        document, sort_keys=False, allow_unicode=True, default_flow_style=False
    )
