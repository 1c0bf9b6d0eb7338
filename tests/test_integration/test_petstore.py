"""End-to-end tests: spec file on disk -> descriptors -> httpx requests."""

from __future__ import annotations

from pathlib import Path

import httpx

from specreq import build_request, from_server, from_specification, load

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


class TestPetstoreServers:
    def test_every_server_resolves(self) -> None:
        spec = load(FIXTURES_DIR / "petstore.yaml")
        for server in spec.servers:
            descriptor = from_server(server)
            assert descriptor.scheme == "http"
            assert descriptor.host == "petstore.swagger.io"
            assert descriptor.port is None
            assert descriptor.base_path == "/v1"

    def test_specification_to_requests(self) -> None:
        spec = load(FIXTURES_DIR / "petstore.yaml")
        requests = [
            build_request(descriptor, method, path)
            for descriptor in from_specification(spec)
            for path, item in spec.paths.items()
            if "{" not in path
            for method in item
        ]
        assert sorted((r.method, str(r.url)) for r in requests) == [
            ("GET", "http://petstore.swagger.io/v1/pets"),
            ("POST", "http://petstore.swagger.io/v1/pets"),
        ]

    def test_request_is_sendable(self) -> None:
        spec = load(FIXTURES_DIR / "petstore.yaml")
        request = build_request(from_server(spec.servers[0]), "GET", "/pets", params={"limit": 2})

        def handler(incoming: httpx.Request) -> httpx.Response:
            assert incoming.url.path == "/v1/pets"
            assert incoming.url.params["limit"] == "2"
            return httpx.Response(200, json=[{"id": 1, "name": "Rex"}])

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            response = client.send(request)
        assert response.json() == [{"id": 1, "name": "Rex"}]


class TestMultiServer:
    def test_staging_and_production(self) -> None:
        spec = load(FIXTURES_DIR / "multi_server.json")
        production, templated, local = from_specification(spec, {"env": "prod", "port": "443"})
        assert production.url == "https://api.example.com/v2"
        assert templated.url == "http://prod.example.com:443/api"
        assert local.port == 8000
