"""Tests for specreq.parser.dumper."""

from __future__ import annotations

import json

import pytest
import yaml

from specreq.models import FormatHint, Specification
from specreq.parser import dump_spec, load_from_bytes, spec_to_dict


class TestSpecToDict:
    """Test conversion back to an OpenAPI document dictionary."""

    def test_uses_document_key_names(self, multi_server_spec: Specification) -> None:
        document = spec_to_dict(multi_server_spec)
        assert document["openapi"] == "3.0.3"
        assert document["externalDocs"]["url"] == "https://docs.example.com"
        assert "openapi_version" not in document
        assert "external_docs" not in document

    def test_omits_unset_fields(self) -> None:
        spec = load_from_bytes(b'{"openapi": "3.0.0"}')
        assert spec_to_dict(spec) == {"openapi": "3.0.0", "paths": {}}

    def test_variable_enum_serialised_as_list(self, multi_server_spec: Specification) -> None:
        document = spec_to_dict(multi_server_spec)
        env = document["servers"][1]["variables"]["env"]
        assert env == {"default": "staging", "enum": ["prod", "staging", "qa"]}


class TestRoundTrip:
    """Dumping then reloading yields an equal Specification."""

    @pytest.mark.parametrize("fmt", [FormatHint.JSON, FormatHint.YAML])
    def test_petstore(self, petstore_spec: Specification, fmt: FormatHint) -> None:
        text = dump_spec(petstore_spec, fmt)
        assert load_from_bytes(text.encode("utf-8"), fmt) == petstore_spec

    @pytest.mark.parametrize("fmt", [FormatHint.JSON, FormatHint.YAML])
    def test_multi_server(self, multi_server_spec: Specification, fmt: FormatHint) -> None:
        text = dump_spec(multi_server_spec, fmt)
        assert load_from_bytes(text, fmt) == multi_server_spec

    def test_json_output_is_valid_json(self, petstore_spec: Specification) -> None:
        document = json.loads(dump_spec(petstore_spec, FormatHint.JSON))
        assert document["servers"] == [{"url": "http://petstore.swagger.io/v1", "variables": {}}]

    def test_yaml_keeps_key_order(self, petstore_spec: Specification) -> None:
        document = yaml.safe_load(dump_spec(petstore_spec))
        assert list(document)[:2] == ["openapi", "info"]


UNQUOTED_STATUS_KEYS = b"""
openapi: 3.0.3
info:
  title: Status codes
  version: 1
paths:
  /pets:
    get:
      parameters:
        - name: limit
          in: query
      responses:
        200:
          description: A list of pets
        404:
          description: Not found
        default:
          description: Unexpected error
"""


class TestUnquotedKeys:
    """YAML integer keys such as ``200:`` survive a round trip."""

    @pytest.fixture()
    def spec(self) -> Specification:
        return load_from_bytes(UNQUOTED_STATUS_KEYS, FormatHint.YAML)

    @pytest.mark.parametrize("fmt", [FormatHint.JSON, FormatHint.YAML])
    def test_round_trip(self, spec: Specification, fmt: FormatHint) -> None:
        text = dump_spec(spec, fmt)
        assert load_from_bytes(text, fmt) == spec

    def test_keys_loaded_as_strings(self, spec: Specification) -> None:
        responses = spec.paths["/pets"]["get"]["responses"]
        assert list(responses) == ["200", "404", "default"]

    def test_yaml_and_json_sources_are_equal(self, spec: Specification) -> None:
        document = {
            "openapi": "3.0.3",
            "info": {"title": "Status codes", "version": "1"},
            "paths": {
                "/pets": {
                    "get": {
                        "parameters": [{"name": "limit", "in": "query"}],
                        "responses": {
                            "200": {"description": "A list of pets"},
                            "404": {"description": "Not found"},
                            "default": {"description": "Unexpected error"},
                        },
                    }
                }
            },
        }
        assert load_from_bytes(json.dumps(document), FormatHint.JSON) == spec

    def test_dumped_json_uses_string_keys(self, spec: Specification) -> None:
        document = json.loads(dump_spec(spec, FormatHint.JSON))
        assert document["paths"]["/pets"]["get"]["responses"]["200"] == {
            "description": "A list of pets"
        }
        assert document["paths"]["/pets"]["get"]["parameters"] == [
            {"name": "limit", "in": "query"}
        ]
