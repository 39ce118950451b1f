#!/usr/bin/env python3
"""
Generate JSON Schemas, YAML variants, and OpenAPI from Pydantic models.

Outputs under blogcms/specs/:
 - schemas/*.json (and *.yaml)
 - openapi.yaml and openapi.json
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import yaml


ROOT = Path(__file__).resolve().parents[1]
SPECS = ROOT / "blogcms" / "specs"
SCHEMAS_DIR = SPECS / "schemas"

sys.path.insert(0, str(ROOT))

from blogcms.specs.models import (  # noqa: E402
    SCHEMA_MODELS,
    PostInput,
    AddPostResponse,
    TagSyncResponse,
)
from blogcms.specs.tag_kinds import TAG_KINDS  # noqa: E402


def write_json_yaml(obj: dict, json_path: Path) -> None:
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)
    yaml_path = json_path.with_suffix(".yaml")
    with yaml_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def generate_model_schemas() -> None:
    for filename, model in SCHEMA_MODELS.items():
        schema = model.model_json_schema(by_alias=True)
        write_json_yaml(schema, SCHEMAS_DIR / filename)


def _envelope_response(description: str, ref: str) -> dict:
    return {
        "description": description,
        "content": {"application/json": {"schema": {"$ref": ref}}},
    }


def build_openapi() -> dict:
    # Inline the model schemas as OpenAPI components
    components = {
        "schemas": {
            "PostInput": PostInput.model_json_schema(by_alias=True),
            "AddPostResponse": AddPostResponse.model_json_schema(),
            "TagSyncResponse": TagSyncResponse.model_json_schema(),
        }
    }
    add_post_ref = "#/components/schemas/AddPostResponse"
    sync_ref = "#/components/schemas/TagSyncResponse"

    spec = {
        "openapi": "3.0.3",
        "info": {
            "title": "blogcms Functions API",
            "version": "0.1.0",
            "description": "HTTP endpoints exposed by the blogcms Azure Functions app.",
        },
        "servers": [
            {"url": "http://localhost:7071/api", "description": "Local Functions host"}
        ],
        "paths": {
            "/posts": {
                "post": {
                    "summary": "Insert a post keyed by its slug",
                    "operationId": "addPost",
                    "parameters": [
                        {
                            "in": "query",
                            "name": "overwrite",
                            "schema": {"type": "boolean", "default": True},
                            "required": False,
                        }
                    ],
                    "requestBody": {
                        "required": True,
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/PostInput"}
                            }
                        },
                    },
                    "responses": {
                        "201": _envelope_response("Post written", add_post_ref),
                        "400": _envelope_response("Invalid JSON or post payload", add_post_ref),
                        "409": _envelope_response("Slug taken and overwrite=false", add_post_ref),
                        "500": _envelope_response("Store failure", add_post_ref),
                    },
                }
            },
            "/tags/{kind}/sync": {
                "post": {
                    "summary": "Rebuild a tag aggregate from every post",
                    "operationId": "syncTags",
                    "parameters": [
                        {
                            "in": "path",
                            "name": "kind",
                            "schema": {"type": "string", "enum": sorted(TAG_KINDS)},
                            "required": True,
                        }
                    ],
                    "responses": {
                        "200": _envelope_response("Aggregate written, or skipped when there are no posts", sync_ref),
                        "404": {
                            "description": "Unknown tag kind",
                            "content": {"text/plain": {"schema": {"type": "string"}}},
                        },
                        "500": _envelope_response("Scan or write failed", sync_ref),
                    },
                }
            },
        },
        "components": components,
    }
    return spec


def generate_openapi() -> None:
    spec = build_openapi()
    write_json_yaml(spec, SPECS / "openapi.json")


def main() -> None:
    generate_model_schemas()
    generate_openapi()
    print("Specs generated under blogcms/specs/")


if __name__ == "__main__":
    main()
