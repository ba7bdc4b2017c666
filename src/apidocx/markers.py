"""Marker vocabulary read by the documentation scanner.

Controllers are plain classes. Routing is declared with decorators::

    @rest_controller
    @request_mapping("/api/users")
    class UserController:

        @get_mapping("/{user_id}")
        def get_user(self, user_id: Annotated[int, PathVariable(), Positive()]) -> User:
            ...

Parameter roles and validation rules travel as ``typing.Annotated`` metadata.
Markers are descriptive only: nothing here routes or validates a request.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

MARKERS_ATTR = "__apidocx_markers__"


class RouteKind(Enum):
    """Routing marker kinds, declared in the order they are checked on a method."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    REQUEST = "REQUEST"


@dataclass(frozen=True)
class ControllerMarker:
    kind: str  # rest_controller / controller


@dataclass(frozen=True)
class RouteMapping:
    kind: RouteKind
    paths: tuple[str, ...] = ()
    methods: tuple[str, ...] = ()

    @property
    def path(self) -> str:
        return self.paths[0] if self.paths else ""

    @property
    def http_method(self) -> str:
        if self.kind is RouteKind.REQUEST:
            return self.methods[0].upper() if self.methods else "GET"
        return self.kind.value


def _attach(target: Any, marker: Any) -> Any:
    # Read the target's own __dict__ so subclasses do not inherit markers.
    markers = vars(target).get(MARKERS_ATTR)
    if markers is None:
        markers = []
        setattr(target, MARKERS_ATTR, markers)
    markers.append(marker)
    return target


def markers_of(target: Any) -> list:
    """Return the markers attached directly to a class or function."""
    if target is None:
        return []
    try:
        return list(vars(target).get(MARKERS_ATTR, ()))
    except TypeError:
        return []


def rest_controller(cls: type) -> type:
    return _attach(cls, ControllerMarker("rest_controller"))


def controller(cls: type) -> type:
    return _attach(cls, ControllerMarker("controller"))


def request_mapping(*paths: str, method: str | Sequence[str] = ()):
    """Generic routing marker, usable on a controller class or a method.

    On a method without ``method`` the endpoint is documented as GET.
    """
    methods = (method,) if isinstance(method, str) else tuple(method)
    return lambda target: _attach(target, RouteMapping(RouteKind.REQUEST, tuple(paths), methods))


def _route(kind: RouteKind):
    def mapping(*paths: str):
        return lambda func: _attach(func, RouteMapping(kind, tuple(paths)))

    mapping.__name__ = f"{kind.value.lower()}_mapping"
    mapping.__doc__ = f"Document the decorated method as a {kind.value} endpoint."
    return mapping


get_mapping = _route(RouteKind.GET)
post_mapping = _route(RouteKind.POST)
put_mapping = _route(RouteKind.PUT)
delete_mapping = _route(RouteKind.DELETE)
patch_mapping = _route(RouteKind.PATCH)


# Parameter roles


@dataclass(frozen=True)
class PathVariable:
    name: str = ""
    required: bool = True


@dataclass(frozen=True)
class RequestParam:
    name: str = ""
    required: bool = True
    default_value: str | None = None


@dataclass(frozen=True)
class RequestBody:
    required: bool = True


ROLE_MARKERS = (PathVariable, RequestParam, RequestBody)


# Validation rules


@dataclass(frozen=True)
class ValidationMarker:
    message: str = field(default="", kw_only=True)


@dataclass(frozen=True)
class NotNull(ValidationMarker):
    pass


@dataclass(frozen=True)
class NotBlank(ValidationMarker):
    pass


@dataclass(frozen=True)
class NotEmpty(ValidationMarker):
    pass


@dataclass(frozen=True)
class Size(ValidationMarker):
    min: int = 0
    max: int = 2147483647


@dataclass(frozen=True)
class Min(ValidationMarker):
    value: int


@dataclass(frozen=True)
class Max(ValidationMarker):
    value: int


@dataclass(frozen=True)
class Pattern(ValidationMarker):
    regexp: str


@dataclass(frozen=True)
class Email(ValidationMarker):
    regexp: str = ".*"


@dataclass(frozen=True)
class Positive(ValidationMarker):
    pass


@dataclass(frozen=True)
class PositiveOrZero(ValidationMarker):
    pass


@dataclass(frozen=True)
class Negative(ValidationMarker):
    pass


@dataclass(frozen=True)
class NegativeOrZero(ValidationMarker):
    pass


@dataclass(frozen=True)
class DecimalMin(ValidationMarker):
    value: str
    inclusive: bool = True


@dataclass(frozen=True)
class DecimalMax(ValidationMarker):
    value: str
    inclusive: bool = True


@dataclass(frozen=True)
class Digits(ValidationMarker):
    integer: int
    fraction: int


@dataclass(frozen=True)
class Future(ValidationMarker):
    pass


@dataclass(frozen=True)
class FutureOrPresent(ValidationMarker):
    pass


@dataclass(frozen=True)
class Past(ValidationMarker):
    pass


@dataclass(frozen=True)
class PastOrPresent(ValidationMarker):
    pass
