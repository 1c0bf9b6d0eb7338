"""OpenAPI spec parser -- load, validate, convert, and serialise documents.

This sub-package is the first half of the specreq pipeline: turning a raw
OpenAPI 3.x document (JSON or YAML, local file or in-memory buffer) into a
:class:`~specreq.models.Specification` that the request builder can consume.

Typical usage::

    from specreq.parser import load

    spec = load("petstore.yaml")
    for server in spec.servers or ():
        print(server.url)

Sub-modules:

* :mod:`~specreq.parser.loader` -- I/O layer (file, bytes) plus format
  detection and parse-error positions.
* :mod:`~specreq.parser.extractor` -- Validation of the ``openapi`` and
  ``servers`` sections and conversion into frozen models.
* :mod:`~specreq.parser.dumper` -- Serialisation back to JSON or YAML.
"""

from specreq.parser.dumper import dump_spec, spec_to_dict
from specreq.parser.extractor import extract_spec
from specreq.parser.loader import load, load_from_bytes

__all__ = ["load", "load_from_bytes", "extract_spec", "dump_spec", "spec_to_dict"]
