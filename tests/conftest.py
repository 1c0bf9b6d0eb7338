"""Shared test fixtures for specreq.

Provides reusable fixtures for locating spec documents on disk, loading them
into :class:`~specreq.models.Specification` objects, and building small
server entries inline. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from specreq.models import Server, ServerVariable, Specification
from specreq.parser import load


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Fixture file paths
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_path() -> Path:
    """Path to the petstore 3.0 YAML fixture."""
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def multi_server_path() -> Path:
    """Path to the JSON fixture declaring three servers, one templated."""
    return FIXTURES_DIR / "multi_server.json"


# ---------------------------------------------------------------------------
# Loaded spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_spec(petstore_path: Path) -> Specification:
    """Loaded petstore 3.0 spec."""
    return load(petstore_path)


@pytest.fixture
def multi_server_spec(multi_server_path: Path) -> Specification:
    """Loaded multi-server spec."""
    return load(multi_server_path)


# ---------------------------------------------------------------------------
# Server fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def templated_server() -> Server:
    """``http://{env}.example.com:{port}/api`` with plain defaults."""
    return Server(
        url="http://{env}.example.com:{port}/api",
        variables={
            "env": ServerVariable(default="staging"),
            "port": ServerVariable(default="8080"),
        },
    )


@pytest.fixture
def enum_server() -> Server:
    """``http://{env}.example.com/api`` with ``env`` restricted to prod/staging."""
    return Server(
        url="http://{env}.example.com/api",
        variables={
            "env": ServerVariable(default="prod", enum=("prod", "staging")),
        },
    )
