import json
from typing import Any, NamedTuple, Optional, Type

from pydantic import BaseModel
from pydantic.json_schema import models_json_schema

REF_TEMPLATE = "#/components/schemas/{model}"


class SchemaDescriptor(NamedTuple):
    name: str
    model: Type[BaseModel]


class RouteDescriptor(NamedTuple):
    method: str
    path: str
    summary: str
    tag: str
    body: Optional[str] = None
    query: Optional[str] = None
    responses: Any = ((200, "OK"),)
    secured: bool = True


def _component_schemas(schemas):
    models = list(dict.fromkeys(descriptor.model for descriptor in schemas))
    _, top = models_json_schema(
        [(model, "validation") for model in models],
        ref_template=REF_TEMPLATE,
    )
    defs = top.get("$defs", {})
    components = {}
    for descriptor in schemas:
        schema = dict(defs.get(descriptor.model.__name__, {}))
        schema["title"] = descriptor.name
        components[descriptor.name] = schema
    # nested definitions (e.g. the Role enum) keep their own names
    described = {model.__name__ for model in models}
    for name, schema in defs.items():
        if name not in described:
            components.setdefault(name, schema)
    return components


def _path_parameters(path):
    params = []
    for segment in path.split("/"):
        if segment.startswith("{") and segment.endswith("}"):
            params.append({
                "name": segment[1:-1],
                "in": "path",
                "required": True,
                "schema": {"type": "integer"},
            })
    return params


def _query_parameters(schema):
    required = set(schema.get("required", ()))
    params = []
    for name, prop in schema.get("properties", {}).items():
        params.append({
            "name": name,
            "in": "query",
            "required": name in required,
            "schema": prop,
        })
    return params


def build_openapi(schemas, routes, *, title, version, server_url):
    """Return a fresh OpenAPI 3.0 document for exactly the given descriptors."""
    components = _component_schemas(schemas)
    paths = {}
    for route in routes:
        operation = {
            "summary": route.summary,
            "tags": [route.tag],
            "responses": {
                str(status): {"description": description}
                for status, description in route.responses
            },
        }
        parameters = _path_parameters(route.path)
        if route.query:
            parameters += _query_parameters(components[route.query])
        if parameters:
            operation["parameters"] = parameters
        if route.body:
            operation["requestBody"] = {
                "required": True,
                "content": {
                    "application/json": {"schema": {"$ref": REF_TEMPLATE.format(model=route.body)}},
                },
            }
        if route.secured:
            operation["security"] = [{"cookieAuth": []}]
        paths.setdefault(route.path, {})[route.method.lower()] = operation

    return {
        "openapi": "3.0.0",
        "info": {"title": title, "version": version},
        "servers": [{"url": server_url}],
        "paths": paths,
        "components": {
            "schemas": components,
            "securitySchemes": {
                "cookieAuth": {"type": "apiKey", "in": "cookie", "name": "session"},
            },
        },
    }


def freeze(document):
    return json.dumps(document, sort_keys=True).encode("utf-8")
