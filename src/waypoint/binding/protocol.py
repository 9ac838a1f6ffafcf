"""Bind-from-map protocol for object-typed handler parameters.

A parameter annotated with a class (not a primitive kind) is built from the
whole request bag.  The class opts in by exposing ``from_params``::

    class Filter:
        def __init__(self, status: str, limit: int) -> None: ...

        @classmethod
        def from_params(cls, params: Mapping[str, Any]) -> "Filter":
            return cls(params.get("status", "open"), int(params.get("limit", 20)))

No base class required. The binder checks the shape, not the lineage.
``BindableFromParams`` is there for classes whose constructor already takes
the bag as its only argument.
"""

from collections.abc import Mapping
from typing import Any, Protocol, Self, runtime_checkable


@runtime_checkable
class FromParams(Protocol):
    """Any class with a ``from_params(params)`` classmethod satisfies this."""

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> Self: ...


class BindableFromParams:
    """Mixin whose ``from_params`` passes the bag straight to the constructor.

    Subclasses accept the request bag in ``__init__`` and pick what they
    need from it::

        class Pagination(BindableFromParams):
            def __init__(self, params: Mapping[str, Any]) -> None:
                self.page = int(params.get("page", 1))
    """

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> Self:
        return cls(params)  # type: ignore[call-arg]
