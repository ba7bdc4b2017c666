"""Documentation model built by one scanning pass.

The scanner converts controller classes into these models; the site
generator and the HTTP surface only ever read them. Field names serialize
in camelCase, which is what the bundled client script expects.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ParameterRole(str, Enum):
    PATH_VARIABLE = "path_variable"
    QUERY_PARAMETER = "query_parameter"
    REQUEST_BODY = "request_body"
    NONE = "none"


class ValidationConstraint(DocModel):
    """A validation rule attached to a parameter or a field."""

    name: str  # Size / Pattern / NotNull ...
    description: str
    attributes: dict = {}


class ParameterDoc(DocModel):
    """A single endpoint parameter."""

    name: str
    type: str  # human readable type expression, e.g. list<User>
    description: str = ""
    required: bool = False
    default_value: str | None = None
    example: str | None = None
    constraints: list[ValidationConstraint] = []
    role: ParameterRole = ParameterRole.NONE

    @property
    def is_path_variable(self) -> bool:
        return self.role is ParameterRole.PATH_VARIABLE

    @property
    def is_request_param(self) -> bool:
        return self.role is ParameterRole.QUERY_PARAMETER

    @property
    def is_request_body(self) -> bool:
        return self.role is ParameterRole.REQUEST_BODY


class ResponseDoc(DocModel):
    status_code: int
    description: str = ""
    type: str | None = None
    example: str | None = None
    media_type: str | None = None


class EndpointDoc(DocModel):
    """One routable method with its verb, URL template and metadata."""

    name: str
    http_method: str  # GET / POST / PUT / PATCH / DELETE
    url: str  # /api/users/{id}
    description: str = ""
    parameters: list[ParameterDoc] = []
    path_variables: list[ParameterDoc] = []
    query_parameters: list[ParameterDoc] = []
    request_body: ParameterDoc | None = None
    response_body: ResponseDoc | None = None
    responses: list[ResponseDoc] = []
    examples: list[str] = []
    tags: list[str] = []
    deprecated: bool = False
    api_note: str | None = None
    api_description: str | None = None


class ControllerDoc(DocModel):
    name: str
    class_name: str
    description: str = ""
    base_url: str = ""
    author: str | None = None
    since: str | None = None
    version: str | None = None
    tags: list[str] = []
    endpoints: list[EndpointDoc] = []


class FieldDoc(DocModel):
    name: str
    type: str
    description: str = ""
    required: bool = False
    default_value: str | None = None
    example: str | None = None
    constraints: list[ValidationConstraint] = []


class ModelDoc(DocModel):
    """Schema documentation for a request or response body type."""

    name: str
    class_name: str
    package: str = ""
    description: str = ""
    fields: list[FieldDoc] = []


class ApiDocumentation(DocModel):
    """Root of the documentation tree produced by one generation pass."""

    title: str = "API Documentation"
    version: str = "1.0.0"
    description: str = ""
    base_url: str = ""
    controllers: list[ControllerDoc] = []
    models: list[ModelDoc] = []
    configuration: dict[str, str] = {}
