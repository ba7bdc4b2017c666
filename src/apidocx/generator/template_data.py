"""Page data handed to the client script.

Only the whitelisted fields below reach the browser; everything is keyed in
camelCase to match ``app.js``.
"""

import json
import logging
from typing import Any

from apidocx.model.base import ApiDocumentation, ControllerDoc, EndpointDoc, ParameterDoc, ResponseDoc

logger = logging.getLogger(__name__)


def to_template_data(doc: ApiDocumentation, controllers: list[ControllerDoc] | None = None) -> dict[str, Any]:
    """Flatten the documentation tree; ``controllers`` narrows the page to a subset."""
    selected = doc.controllers if controllers is None else controllers
    return {
        "title": doc.title,
        "version": doc.version,
        "description": doc.description,
        "baseUrl": doc.base_url,
        "controllers": [controller_data(c) for c in selected],
    }


def controller_data(controller: ControllerDoc) -> dict[str, Any]:
    return {
        "name": controller.name,
        "className": controller.class_name,
        "description": controller.description,
        "baseUrl": controller.base_url,
        "author": controller.author,
        "since": controller.since,
        "version": controller.version,
        "tags": list(controller.tags),
        "endpoints": [endpoint_data(e) for e in controller.endpoints],
    }


def endpoint_data(endpoint: EndpointDoc) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": endpoint.name,
        "description": endpoint.description,
        "httpMethod": endpoint.http_method,
        "url": endpoint.url,
        "pathVariables": [parameter_data(p) for p in endpoint.path_variables],
        "queryParameters": [parameter_data(p) for p in endpoint.query_parameters],
        "responses": [response_data(r) for r in endpoint.responses],
        "examples": list(endpoint.examples),
        "tags": list(endpoint.tags),
        "deprecated": endpoint.deprecated,
        "apiNote": endpoint.api_note,
        "apiDescription": endpoint.api_description,
    }
    if endpoint.request_body is not None:
        data["requestBody"] = request_body_data(endpoint.request_body)
    return data


def parameter_data(param: ParameterDoc) -> dict[str, Any]:
    return {
        "name": param.name,
        "type": param.type,
        "description": param.description,
        "required": param.required,
        "defaultValue": param.default_value,
        "example": param.example,
        "constraints": [{"name": c.name, "description": c.description} for c in param.constraints],
    }


def request_body_data(body: ParameterDoc) -> dict[str, Any]:
    return {
        "type": body.type,
        "description": body.description,
        "required": body.required,
        "example": format_example(body.example),
    }


def response_data(response: ResponseDoc) -> dict[str, Any]:
    return {
        "statusCode": response.status_code,
        "description": response.description,
        "mediaType": response.media_type,
        "example": response.example,
    }


def format_example(example: str | None) -> str:
    """Pretty-print a JSON example; non-JSON text is kept as is, nothing gives ``{}``."""
    if not example or not example.strip():
        return "{}"
    try:
        return json.dumps(json.loads(example), indent=2)
    except ValueError:
        return example


def serialize_page_data(data: dict[str, Any]) -> str:
    """JSON text safe to embed in a ``<script>`` block; ``{}`` if encoding fails."""
    try:
        text = json.dumps(data)
    except (TypeError, ValueError):
        logger.error("Failed to serialize page data", exc_info=True)
        return "{}"
    return text.replace("</", "<\\/")
