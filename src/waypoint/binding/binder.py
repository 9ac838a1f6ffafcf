"""Bind a request bag onto a handler's parameters.

Resolution order, per parameter, in declaration order:

1. Lookup key: the parameter name, snake-cased when ``snake_params`` is set
2. Object type: built from the whole bag via ``from_params``
3. Primitive kind, value present and not ``None``: coerced with
   ``waypoint.coercion.coerce``
4. Primitive kind, key absent or ``None``: default, else ``None`` if nullable,
   else ``MissingParameter``

Binding is all-or-nothing.  The first failure aborts and nothing is invoked.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from waypoint.binding.protocol import FromParams
from waypoint.binding.spec import ParameterSpec, iter_parameters
from waypoint.casing import snake
from waypoint.coercion import coerce
from waypoint.errors import MissingParameter, UnsupportedType

logger = logging.getLogger("waypoint.binding")


@dataclass(frozen=True, slots=True)
class BoundArguments:
    """Arguments ready to be splatted into the handler call."""

    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)


def lookup_key(name: str, *, snake_params: bool, separator: str = "_") -> str:
    """Return the request-bag key for a handler parameter named *name*."""
    return snake(name, separator) if snake_params else name


def bind_arguments(
    handler: Callable[..., Any],
    params: Mapping[str, Any],
    *,
    snake_params: bool = True,
    separator: str = "_",
) -> BoundArguments:
    """Bind *params* onto *handler*'s signature.

    Positional parameters land in ``args`` in declaration order;
    keyword-only parameters land in ``kwargs``.  *params* is never mutated.
    """
    args: list[Any] = []
    kwargs: dict[str, Any] = {}

    for spec in iter_parameters(handler):
        key = lookup_key(spec.name, snake_params=snake_params, separator=separator)
        value = bind_parameter(spec, key, params)
        if spec.keyword_only:
            kwargs[spec.name] = value
        else:
            args.append(value)

    return BoundArguments(args=tuple(args), kwargs=kwargs)


def bind_parameter(spec: ParameterSpec, key: str, params: Mapping[str, Any]) -> Any:
    """Produce the value for one parameter, or raise a ``BindingError``."""
    if spec.is_object:
        return build_object(spec, params)

    value = params.get(key)
    if value is not None:
        value = coerce(spec.kind, key, value)
        logger.debug("Bound %s from %r as %s", spec.name, key, spec.kind)
        return value

    if spec.has_default:
        return spec.default
    if spec.nullable:
        return None

    raise MissingParameter(key)


def build_object(spec: ParameterSpec, params: Mapping[str, Any]) -> Any:
    """Build an object-typed parameter from the whole request bag.

    Whatever ``from_params`` raises propagates unchanged.
    """
    target = spec.annotation
    if not isinstance(target, type) or not isinstance(target, FromParams):
        msg = (
            f"The type of parameter {spec.name!r} is not supported, "
            f"{getattr(target, '__name__', target)!r} does not define from_params()"
        )
        raise UnsupportedType(spec.name, msg)

    logger.debug("Building %s for %s from request params", target.__name__, spec.name)
    return target.from_params(params)
