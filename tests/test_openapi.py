"""Tests for OpenAPI document assembly."""

from __future__ import annotations

import json

from pydantic import BaseModel

from taskboards.openapi import RouteDescriptor, SchemaDescriptor, build_openapi
from taskboards.routes import ROUTES
from taskboards.schemas import SCHEMAS


def _build(schemas=SCHEMAS, routes=ROUTES):
    return build_openapi(schemas, routes, title="T", version="1", server_url="http://x/api")


def test_every_named_schema_is_a_component():
    components = _build()["components"]["schemas"]
    for descriptor in SCHEMAS:
        assert descriptor.name in components
    assert components["UpdateBoardBody"]["title"] == "UpdateBoardBody"
    assert "Role" in components


def test_body_refs_resolve():
    doc = _build()
    components = doc["components"]["schemas"]
    for route in ROUTES:
        if route.body:
            ref = doc["paths"][route.path][route.method.lower()]["requestBody"]["content"]["application/json"]["schema"]["$ref"]
            assert ref.rsplit("/", 1)[-1] in components


def test_path_and_query_parameters():
    operation = _build()["paths"]["/boards/{boardId}/tasks"]["get"]
    params = {(p["name"], p["in"]) for p in operation["parameters"]}
    assert params == {("boardId", "path"), ("completed", "query"), ("q", "query"), ("page", "query"), ("size", "query")}

    bulk = _build()["paths"]["/boards/{boardId}/tasks"]["delete"]
    completed = next(p for p in bulk["parameters"] if p["name"] == "completed")
    assert completed["required"] is True


def test_build_is_pure():
    class Thing(BaseModel):
        name: str

    schemas = (SchemaDescriptor("Thing", Thing),)
    routes = (RouteDescriptor("POST", "/things", "Make a thing", "Things", body="Thing"),)

    first = _build(schemas, routes)
    second = _build(schemas, routes)

    assert first == second
    assert list(first["paths"]) == ["/things"]
    assert first["paths"]["/things"]["post"]["security"] == [{"cookieAuth": []}]
    # a second build does not see anything from the full route table
    assert "/boards" not in _build(schemas, routes)["paths"]


def test_served_document(app):
    resp = app.test_client().get("/api/openapi.json")
    assert resp.status_code == 200
    doc = json.loads(resp.data)
    assert doc["info"]["title"] == "Task Boards API"
    assert "/boards/{boardId}/share/{userId}" in doc["paths"]
    assert doc["paths"]["/ping"]["get"].get("security") is None
