"""Handler signature introspection.

Turns a handler's formal parameter list into ``ParameterSpec`` records:
the parameter name, its primitive kind (or ``"object"``), the declared
annotation, its default, and whether it accepts ``None``.

Every parameter must be annotated with exactly one type.  ``X | None`` is
allowed and marks the parameter nullable; any other union, ``Any``, a
missing annotation, or ``*args``/``**kwargs`` raises ``UnsupportedParameter``.
"""

import inspect
import types
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin

from waypoint.coercion import kind_for_annotation
from waypoint.errors import UnsupportedParameter


class _Missing:
    """Marker for a parameter without a default value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

OBJECT_KIND = "object"


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """One declared handler parameter, as seen by the binder."""

    name: str
    kind: str
    annotation: Any
    default: Any = MISSING
    nullable: bool = False
    keyword_only: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def is_object(self) -> bool:
        return self.kind == OBJECT_KIND


def iter_parameters(handler: Callable[..., Any]) -> Iterator[ParameterSpec]:
    """Yield a ``ParameterSpec`` per parameter of *handler*, in declaration order.

    Specs are produced lazily so a caller that binds as it goes reports the
    first bad parameter in declaration order.  Pass a bound method when the
    handler is an instance method; ``self`` is not part of the result.
    """
    try:
        sig = inspect.signature(handler, eval_str=True)
    except NameError:
        # Unresolvable forward reference; the string annotation is rejected below
        sig = inspect.signature(handler)

    for name, param in sig.parameters.items():
        yield describe(name, param)


def introspect(handler: Callable[..., Any]) -> tuple[ParameterSpec, ...]:
    """Return every ``ParameterSpec`` of *handler* at once."""
    return tuple(iter_parameters(handler))


def describe(name: str, param: inspect.Parameter) -> ParameterSpec:
    """Build the ``ParameterSpec`` for a single ``inspect.Parameter``."""
    if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
        msg = f"Parameter {name!r} is variadic, only named parameters can be bound"
        raise UnsupportedParameter(name, msg)

    annotation = _unwrap_annotated(param.annotation)
    if annotation is inspect.Parameter.empty or annotation is Any or isinstance(annotation, str):
        msg = f"Parameter {name!r} has no usable type annotation"
        raise UnsupportedParameter(name, msg)

    nullable = False
    if _is_union(annotation):
        members = get_args(annotation)
        non_none = [a for a in members if a is not type(None)]
        if len(non_none) != 1:
            msg = f"Parameter {name!r} is a union of several types, it must declare one"
            raise UnsupportedParameter(name, msg)
        nullable = len(non_none) < len(members)
        annotation = _unwrap_annotated(non_none[0])

    kind = kind_for_annotation(annotation) or OBJECT_KIND
    default = MISSING if param.default is inspect.Parameter.empty else param.default

    return ParameterSpec(
        name=name,
        kind=kind,
        annotation=annotation,
        default=default,
        nullable=nullable or kind == "null" or default is None,
        keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
    )


def _is_union(annotation: Any) -> bool:
    origin = get_origin(annotation)
    return origin is Union or origin is types.UnionType


def _unwrap_annotated(annotation: Any) -> Any:
    """Strip ``Annotated[X, ...]`` metadata down to ``X``."""
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[0]
    return annotation
