"""Controller/endpoint model builder.

Walks a marked controller class with ``inspect`` and ``typing`` and turns
it into a :class:`ControllerDoc`, using the docstring parser for prose and
the constraint describer for ``Annotated`` validation markers.
"""

import dataclasses
import datetime
import enum
import inspect
import json
import logging
import types
import typing
from collections.abc import Iterable, Iterator
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel

from apidocx.markers import (
    ROLE_MARKERS,
    ControllerMarker,
    PathVariable,
    RequestBody,
    RequestParam,
    RouteKind,
    RouteMapping,
    markers_of,
)
from apidocx.model.base import (
    ControllerDoc,
    EndpointDoc,
    FieldDoc,
    ModelDoc,
    ParameterDoc,
    ParameterRole,
    ResponseDoc,
)
from apidocx.parser.comment import ParsedComment, parse_comment
from apidocx.parser.constraints import describe_constraints

logger = logging.getLogger(__name__)

_EMPTY = inspect.Parameter.empty

DEFAULT_RESPONSES: dict[str, tuple[tuple[int, str], ...]] = {
    "GET": ((200, "Successfully retrieved data"), (404, "Resource not found")),
    "POST": ((201, "Successfully created resource"), (400, "Invalid request data")),
    "PUT": (
        (200, "Successfully updated resource"),
        (404, "Resource not found"),
        (400, "Invalid request data"),
    ),
    "PATCH": (
        (200, "Successfully updated resource"),
        (404, "Resource not found"),
        (400, "Invalid request data"),
    ),
    "DELETE": ((204, "Successfully deleted resource"), (404, "Resource not found")),
}
SERVER_ERROR = (500, "Internal server error")

SAMPLE_VALUES: dict[Any, Any] = {
    str: "string",
    int: 0,
    float: 0.0,
    bool: True,
    datetime.date: "2024-01-01",
    datetime.datetime: "2024-01-01T00:00:00",
}
MAX_EXAMPLE_DEPTH = 3


def is_controller(cls: type) -> bool:
    return any(isinstance(m, ControllerMarker) for m in markers_of(cls))


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def combine_urls(base_url: str, endpoint_url: str) -> str:
    """Join a controller prefix and an endpoint path with exactly one slash."""
    if not base_url:
        return endpoint_url
    if not endpoint_url or endpoint_url == "/":
        return base_url
    return base_url.rstrip("/") + "/" + endpoint_url.lstrip("/")


def default_responses(http_method: str) -> list[ResponseDoc]:
    """Responses documented for an endpoint whose docstring declares none."""
    pairs = DEFAULT_RESPONSES.get(http_method.upper(), ())
    return [ResponseDoc(status_code=code, description=text) for code, text in (*pairs, SERVER_ERROR)]


def split_annotation(annotation: Any) -> tuple[Any, tuple]:
    """Split ``Annotated[T, *meta]`` into ``(T, meta)``."""
    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        return base, tuple(metadata)
    return annotation, ()


def describe_type(annotation: Any) -> str:
    """Render a type as ``Name`` or ``Outer<Inner1, Inner2>``."""
    if annotation is _EMPTY or annotation is Any:
        return "Any"
    if annotation is None or annotation is type(None):
        return "None"
    if annotation is Ellipsis:
        return "..."
    if isinstance(annotation, str):
        return annotation

    origin = get_origin(annotation)
    if origin is Annotated:
        return describe_type(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        others = [a for a in args if a is not type(None)]
        if len(others) == 1 and len(args) == 2:
            return f"Optional<{describe_type(others[0])}>"
        return f"Union<{', '.join(describe_type(a) for a in args)}>"
    if origin is not None:
        name = _type_name(origin)
        args = get_args(annotation)
        if not args:
            return name
        return f"{name}<{', '.join(describe_type(a) for a in args)}>"
    return _type_name(annotation)


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or getattr(tp, "_name", None) or str(tp)


def find_route(markers: Iterable[Any]) -> RouteMapping | None:
    """Pick the routing marker that wins under the GET..PATCH, REQUEST precedence."""
    routes = [m for m in markers if isinstance(m, RouteMapping)]
    for kind in RouteKind:
        for route in routes:
            if route.kind is kind:
                return route
    return None


def class_base_url(cls: type) -> str:
    for marker in markers_of(cls):
        if isinstance(marker, RouteMapping):
            return marker.path
    return ""


def endpoint_members(cls: type) -> Iterator[tuple[Any, RouteMapping, bool]]:
    """Yield ``(function, route, bound)`` for each routed method declared on ``cls``.

    ``bound`` tells whether the first parameter is ``self``/``cls``.
    """
    for member in vars(cls).values():
        if isinstance(member, staticmethod):
            func, bound = member.__func__, False
        elif isinstance(member, classmethod):
            func, bound = member.__func__, True
        elif inspect.isfunction(member):
            func, bound = member, True
        else:
            continue

        markers = markers_of(func)
        if member is not func:
            markers += markers_of(member)
        route = find_route(markers)
        if route is not None:
            yield func, route, bound


def _signature(func: Any) -> inspect.Signature:
    try:
        return inspect.signature(func, eval_str=True)
    except (NameError, AttributeError, TypeError, SyntaxError):
        logger.debug("Unresolved annotations on %s, using raw annotations", func.__qualname__, exc_info=True)
        return inspect.signature(func)


def _call_parameters(func: Any, bound: bool) -> list[inspect.Parameter]:
    params = list(_signature(func).parameters.values())
    if bound and params:
        params = params[1:]
    return [p for p in params if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)]


def _own_doc(cls: type) -> str | None:
    doc = cls.__doc__
    # dataclasses synthesize "Name(field: type, ...)" when there is no docstring
    if doc and dataclasses.is_dataclass(cls) and doc.startswith(f"{cls.__name__}("):
        return None
    return doc


# Body types


def is_model_type(tp: Any) -> bool:
    return inspect.isclass(tp) and (issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp))


@dataclasses.dataclass
class _FieldSpec:
    name: str
    annotation: Any
    metadata: tuple
    required: bool
    default: Any = None
    description: str = ""


def _field_specs(cls: type) -> list[_FieldSpec]:
    if issubclass(cls, BaseModel):
        specs = []
        for name, info in cls.model_fields.items():
            required = info.is_required()
            specs.append(
                _FieldSpec(
                    name=info.alias or name,
                    annotation=info.annotation,
                    metadata=tuple(info.metadata),
                    required=required,
                    default=None if required else info.get_default(call_default_factory=True),
                    description=info.description or "",
                )
            )
        return specs

    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, AttributeError, TypeError):
        logger.debug("Unresolved annotations on %s", qualified_name(cls), exc_info=True)
        hints = {}

    specs = []
    for f in dataclasses.fields(cls):
        annotation, metadata = split_annotation(hints.get(f.name, f.type))
        has_default = f.default is not dataclasses.MISSING
        has_factory = f.default_factory is not dataclasses.MISSING
        default = f.default if has_default else (f.default_factory() if has_factory else None)
        specs.append(
            _FieldSpec(
                name=f.name,
                annotation=annotation,
                metadata=metadata,
                required=not (has_default or has_factory),
                default=default,
            )
        )
    return specs


def sample_value(annotation: Any, name: str = "", depth: int = 0) -> Any:
    """A JSON-compatible placeholder value for ``annotation``."""
    annotation, _ = split_annotation(annotation)
    origin = get_origin(annotation)

    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        return sample_value(args[0], name, depth) if args else None
    if origin in (list, set, frozenset, tuple) or annotation in (list, set, frozenset, tuple):
        args = get_args(annotation)
        if args and args[0] is not Ellipsis:
            return [sample_value(args[0], name, depth + 1)]
        return []
    if origin is dict or annotation is dict:
        return {}
    if is_model_type(annotation):
        if depth >= MAX_EXAMPLE_DEPTH:
            return {}
        return {
            spec.name: sample_value(spec.annotation, spec.name, depth + 1)
            for spec in _field_specs(annotation)
        }
    if inspect.isclass(annotation) and issubclass(annotation, enum.Enum):
        members = list(annotation)
        return members[0].value if members else None
    if annotation is str and "email" in name.lower():
        return "user@example.com"
    return SAMPLE_VALUES.get(annotation)


def example_for_type(annotation: Any) -> str | None:
    """Pretty JSON example for a model/dataclass body type, None for anything else."""
    annotation, _ = split_annotation(annotation)
    if not is_model_type(annotation):
        return None
    return json.dumps(sample_value(annotation), indent=2)


class ControllerDocBuilder:
    """Builds the documentation tree for marked controller classes."""

    def __init__(self, auto_generate_examples: bool = True, manual_response_docs: bool = True):
        self.auto_generate_examples = auto_generate_examples
        self.manual_response_docs = manual_response_docs

    def build_controller(self, cls: type) -> ControllerDoc:
        base_url = class_base_url(cls)
        parsed = parse_comment(cls.__doc__)

        endpoints = [
            self.build_endpoint(func, route, base_url, bound)
            for func, route, bound in endpoint_members(cls)
        ]
        logger.debug("Processed controller %s -> %d endpoints", cls.__name__, len(endpoints))

        return ControllerDoc(
            name=cls.__name__,
            class_name=qualified_name(cls),
            description=parsed.description,
            base_url=base_url,
            author=parsed.author,
            since=parsed.since,
            version=parsed.version,
            endpoints=endpoints,
        )

    def build_endpoint(self, func: Any, route: RouteMapping, base_url: str = "", bound: bool = True) -> EndpointDoc:
        http_method = route.http_method
        parsed = parse_comment(func.__doc__)

        parameters = [self.build_parameter(p, parsed) for p in _call_parameters(func, bound)]
        bodies = [p for p in parameters if p.is_request_body]
        if len(bodies) > 1:
            logger.warning("%s declares %d request bodies, documenting the first", func.__qualname__, len(bodies))

        responses = parsed.responses if self.manual_response_docs else []
        if not responses:
            responses = default_responses(http_method)

        return_type = _signature(func).return_annotation
        return EndpointDoc(
            name=func.__name__,
            http_method=http_method,
            url=combine_urls(base_url, route.path),
            description=parsed.description,
            parameters=parameters,
            path_variables=[p for p in parameters if p.is_path_variable],
            query_parameters=[p for p in parameters if p.is_request_param],
            request_body=bodies[0] if bodies else None,
            response_body=ResponseDoc(status_code=200, description="Success", type=describe_type(return_type)),
            responses=responses,
            examples=parsed.api_examples,
            deprecated=parsed.is_deprecated,
            api_note=parsed.api_note,
            api_description=parsed.api_description,
        )

    def build_parameter(self, param: inspect.Parameter, parsed: ParsedComment | None = None) -> ParameterDoc:
        annotation, metadata = split_annotation(param.annotation)
        roles = [m for m in metadata if isinstance(m, ROLE_MARKERS)]
        has_default = param.default is not _EMPTY

        name = param.name
        role = ParameterRole.NONE
        required = False
        default_value = None
        example = None

        if len(roles) > 1:
            logger.warning(
                "Parameter %r carries several role markers (%s); leaving it unclassified",
                param.name,
                ", ".join(type(m).__name__ for m in roles),
            )
        elif roles:
            marker = roles[0]
            if isinstance(marker, PathVariable):
                role = ParameterRole.PATH_VARIABLE
                name = marker.name or param.name
                required = marker.required
            elif isinstance(marker, RequestParam):
                role = ParameterRole.QUERY_PARAMETER
                name = marker.name or param.name
                default_value = marker.default_value
                if default_value is None and has_default and param.default is not None:
                    default_value = str(param.default)
                required = marker.required and not has_default and marker.default_value is None
            elif isinstance(marker, RequestBody):
                role = ParameterRole.REQUEST_BODY
                required = marker.required
                if self.auto_generate_examples:
                    example = example_for_type(annotation)

        descriptions = parsed.params if parsed else {}
        return ParameterDoc(
            name=name,
            type=describe_type(annotation),
            description=descriptions.get(param.name) or descriptions.get(name, ""),
            required=required,
            default_value=default_value,
            example=example,
            constraints=describe_constraints(metadata),
            role=role,
        )

    def build_model(self, cls: type) -> ModelDoc:
        """Document a pydantic model or dataclass used as a body type."""
        parsed = parse_comment(_own_doc(cls))
        fields = []
        for spec in _field_specs(cls):
            fields.append(
                FieldDoc(
                    name=spec.name,
                    type=describe_type(spec.annotation),
                    description=spec.description or parsed.params.get(spec.name, ""),
                    required=spec.required,
                    default_value=None if spec.default is None else str(spec.default),
                    example=_field_example(spec),
                    constraints=describe_constraints(spec.metadata),
                )
            )
        return ModelDoc(
            name=cls.__name__,
            class_name=qualified_name(cls),
            package=cls.__module__,
            description=parsed.description,
            fields=fields,
        )

    def build_models(self, classes: Iterable[type]) -> list[ModelDoc]:
        """Document every model type used as a request body or return type."""
        found: dict[str, type] = {}
        for cls in classes:
            for func, _, bound in endpoint_members(cls):
                candidates = []
                for param in _call_parameters(func, bound):
                    annotation, metadata = split_annotation(param.annotation)
                    if any(isinstance(m, RequestBody) for m in metadata):
                        candidates.append(annotation)
                candidates.append(split_annotation(_signature(func).return_annotation)[0])
                for candidate in candidates:
                    if is_model_type(candidate):
                        found.setdefault(qualified_name(candidate), candidate)
        return [self.build_model(model) for model in found.values()]


def _field_example(spec: _FieldSpec) -> str | None:
    value = sample_value(spec.annotation, spec.name)
    if value is None:
        return None
    return value if isinstance(value, str) else json.dumps(value)
