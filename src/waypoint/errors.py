"""Waypoint exception hierarchy.

Shared across routing, binding, coercion, and the dispatcher so every module
raises and catches the same types.  Errors raised by a controller container or
by an object-typed parameter are never wrapped in these.
"""


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when dispatcher configuration is invalid.

    Also raised when setup methods are called on a frozen dispatcher.
    """


class RouteError(WaypointError):
    """The route target is forbidden, missing, or not public."""

    def __init__(self, detail: str, *, target: object = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.target = target


class BindingError(WaypointError):
    """A handler parameter could not be bound from the request bag."""

    def __init__(self, param: str, detail: str) -> None:
        super().__init__(detail)
        self.param = param
        self.detail = detail


class TypeMismatch(BindingError):  # noqa: N818
    """A value does not satisfy the validation rule of its declared kind."""

    def __init__(self, param: str, expected: str, message: str = "") -> None:
        message = message or (
            f"The type of parameter {param!r} is wrong, it must be of {expected} type"
        )
        super().__init__(param, message)
        self.expected = expected
        self.message = message


class UnsupportedType(BindingError):  # noqa: N818
    """The declared type is neither a primitive kind nor constructible from params."""


class UnsupportedParameter(BindingError):  # noqa: N818
    """The parameter has no usable type annotation."""


class MissingParameter(BindingError):  # noqa: N818
    """A required parameter is absent, has no default, and is not nullable."""

    def __init__(self, param: str, detail: str = "") -> None:
        super().__init__(param, detail or f"Parameter {param!r} can not be empty")
