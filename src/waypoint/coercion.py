"""Primitive-kind coercion for request values.

Each kind has one coercer that either returns the converted value or raises
``TypeMismatch``.  There is no best-effort fallback: ``"3.5"`` is not an int,
``1`` is not a bool, and ``"42"`` is not a float.

Kinds and what they accept:

- ``string``: str, int, float (never bool)
- ``array``: list, tuple, or any mapping
- ``int``: int, a float whose string form is integral, or a string matching ``-?\\d+``
- ``bool``: bool only
- ``float``: int, float, or a decimal/exponent string such as ``"1.5e10"``
- ``null``: ``None`` only
- ``true`` / ``false``: exactly that boolean
"""

import re
from collections.abc import Callable, Mapping, MutableMapping, MutableSequence, Sequence
from dataclasses import dataclass
from typing import Any, Literal, get_args, get_origin

from waypoint.errors import BindingError, TypeMismatch, UnsupportedType

_INT_PATTERN = re.compile(r"-?\d+", re.ASCII)
_FLOAT_PATTERN = re.compile(r"[+-]?(\d*\.\d+([eE][+-]?\d+)?|\d+[eE][+-]?\d+)", re.ASCII)


def _float_text(value: float) -> str:
    """Render *value* with 14 significant digits, as a scalar string cast does.

    Integral values lose their fraction (``1.0`` -> ``"1"``) and large or tiny
    magnitudes switch to exponent form with a one-digit fraction
    (``1e20`` -> ``"1.0E+20"``).
    """
    text = f"{value:.14G}"
    mantissa, sep, exponent = text.partition("E")
    if not sep:
        return text
    if "." not in mantissa:
        mantissa += ".0"
    return f"{mantissa}E{int(exponent):+d}"


def _coerce_string(param: str, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise TypeMismatch(param, "string")
    if isinstance(value, float):
        return _float_text(value)
    return str(value)


def _coerce_array(param: str, value: Any) -> Any:
    if isinstance(value, (list, tuple, Mapping)):
        return value
    raise TypeMismatch(param, "array")


def _coerce_int(param: str, value: Any) -> int:
    if isinstance(value, bool):
        raise TypeMismatch(param, "int")
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        text = _float_text(value)
        if _INT_PATTERN.fullmatch(text):
            return int(text)
        raise TypeMismatch(param, "int")
    if isinstance(value, str) and _INT_PATTERN.fullmatch(value):
        return int(value)
    raise TypeMismatch(param, "int")


def _coerce_bool(param: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise TypeMismatch(param, "bool")


def _coerce_float(param: str, value: Any) -> float:
    if isinstance(value, bool):
        raise TypeMismatch(param, "float")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and _FLOAT_PATTERN.fullmatch(value):
        return float(value)
    raise TypeMismatch(param, "float")


def _coerce_null(param: str, value: Any) -> None:
    if value is None:
        return None
    raise TypeMismatch(param, "null")


def _coerce_true(param: str, value: Any) -> bool:
    if value is True:
        return True
    raise TypeMismatch(param, "true", f"The type of parameter {param!r} is wrong, it only accepts true")


def _coerce_false(param: str, value: Any) -> bool:
    if value is False:
        return False
    raise TypeMismatch(param, "false", f"The type of parameter {param!r} is wrong, it only accepts false")


# kind name -> coercer(param, value)
COERCERS: dict[str, Callable[[str, Any], Any]] = {
    "string": _coerce_string,
    "array": _coerce_array,
    "int": _coerce_int,
    "bool": _coerce_bool,
    "float": _coerce_float,
    "null": _coerce_null,
    "true": _coerce_true,
    "false": _coerce_false,
}

KINDS: frozenset[str] = frozenset(COERCERS)


def coerce(kind: str, param: str, value: Any) -> Any:
    """Convert *value* to *kind* for parameter *param*.

    Raises ``TypeMismatch`` if the value fails the kind's rule.
    Raises ``UnsupportedType`` if *kind* is not a registered kind.
    """
    coercer = COERCERS.get(kind)
    if coercer is None:
        msg = f"The type of parameter {param!r} is wrong, type {kind!r} is not supported"
        raise UnsupportedType(param, msg)
    return coercer(param, value)


@dataclass(frozen=True, slots=True)
class CoercionResult:
    """Outcome of ``try_coerce``: a value or the error that rejected it."""

    value: Any = None
    error: BindingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value


def try_coerce(kind: str, param: str, value: Any) -> CoercionResult:
    """Like ``coerce`` but returns the failure instead of raising it."""
    try:
        return CoercionResult(value=coerce(kind, param, value))
    except (TypeMismatch, UnsupportedType) as exc:
        return CoercionResult(error=exc)


# Python type -> kind
_SCALAR_KINDS: dict[type, str] = {
    str: "string",
    int: "int",
    float: "float",
    bool: "bool",
}

_ARRAY_TYPES: frozenset[Any] = frozenset(
    {list, tuple, dict, Sequence, MutableSequence, Mapping, MutableMapping}
)


def kind_for_annotation(annotation: Any) -> str | None:
    """Map a resolved type annotation to its primitive kind.

    Returns ``None`` when the annotation is not primitive (an object type,
    or something that is not a type at all).  ``X | None`` must be unwrapped
    by the caller first.
    """
    if annotation is None or annotation is type(None):
        return "null"

    if isinstance(annotation, type) and annotation in _SCALAR_KINDS:
        return _SCALAR_KINDS[annotation]

    origin = get_origin(annotation)
    if origin is Literal:
        args = get_args(annotation)
        if len(args) == 1 and args[0] is True:
            return "true"
        if len(args) == 1 and args[0] is False:
            return "false"
        return None

    if (origin or annotation) in _ARRAY_TYPES:
        return "array"

    return None
