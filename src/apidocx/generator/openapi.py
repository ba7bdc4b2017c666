"""Minimal OpenAPI export: document info only, no paths."""

from typing import Any

from apidocx.model.base import ApiDocumentation

OPENAPI_VERSION = "3.0.3"


def to_openapi(doc: ApiDocumentation) -> dict[str, Any]:
    return {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": doc.title,
            "version": doc.version,
            "description": doc.description,
        },
        "paths": {},
        "components": {},
    }
