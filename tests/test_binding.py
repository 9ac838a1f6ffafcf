"""Tests for waypoint.binding — signature introspection and request-bag binding."""

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Optional

import pytest

from waypoint.binding.binder import BoundArguments, bind_arguments, bind_parameter, lookup_key
from waypoint.binding.protocol import BindableFromParams, FromParams
from waypoint.binding.spec import MISSING, ParameterSpec, describe, introspect, iter_parameters
from waypoint.errors import MissingParameter, TypeMismatch, UnsupportedParameter, UnsupportedType


class Filter:
    def __init__(self, status: str, limit: int) -> None:
        self.status = status
        self.limit = limit

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "Filter":
        return cls(params.get("status", "open"), int(params.get("limit", 20)))


class Pagination(BindableFromParams):
    def __init__(self, params: Mapping[str, Any]) -> None:
        self.page = int(params["page"])


class Plain:
    pass


class FilterConstructionError(Exception):
    pass


class BrokenFilter:
    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "BrokenFilter":
        raise FilterConstructionError(f"cannot build from {sorted(params)}")


def get_info(userId: int) -> int:  # noqa: N803
    return userId


def search(query: str, page: int = 1, ratio: float | None = None, *, strict: bool = False) -> None:
    pass


def everything(
    name: str,
    tags: list[str],
    meta: dict[str, Any],
    active: bool,
    score: float,
    nothing: None,
    always: Literal[True],
    never: Literal[False],
) -> None:
    pass


def with_object(userId: int, filters: Filter) -> None:  # noqa: N803
    pass


def unannotated(name) -> None:  # type: ignore[no-untyped-def]
    pass


def with_any(value: Any) -> None:
    pass


def with_union(value: int | str) -> None:
    pass


def with_args(*values: int) -> None:
    pass


def with_kwargs(**values: int) -> None:
    pass


def with_optional(value: Optional[int]) -> None:  # noqa: UP045
    pass


def with_annotated(value: Annotated[int, "id"]) -> None:
    pass


def with_none_default(value: int = None) -> None:  # type: ignore[assignment]
    pass


def unresolvable(value: "NoSuchType") -> None:  # type: ignore[name-defined]  # noqa: F821
    pass


def bad_then_good(first: int, second) -> None:  # type: ignore[no-untyped-def]
    pass


class TestIntrospect:
    def test_declaration_order(self) -> None:
        specs = introspect(search)
        assert [s.name for s in specs] == ["query", "page", "ratio", "strict"]

    def test_kinds(self) -> None:
        kinds = [s.kind for s in introspect(everything)]
        assert kinds == ["string", "array", "array", "bool", "float", "null", "true", "false"]

    def test_defaults(self) -> None:
        query, page, ratio, strict = introspect(search)
        assert query.has_default is False
        assert query.default is MISSING
        assert page.default == 1
        assert ratio.default is None
        assert strict.default is False

    def test_nullable_union(self) -> None:
        ratio = introspect(search)[2]
        assert ratio.kind == "float"
        assert ratio.nullable is True
        assert ratio.annotation is float

    def test_optional_is_nullable(self) -> None:
        (spec,) = introspect(with_optional)
        assert spec.kind == "int"
        assert spec.nullable is True

    def test_none_default_is_nullable(self) -> None:
        (spec,) = introspect(with_none_default)
        assert spec.nullable is True

    def test_null_kind_is_nullable(self) -> None:
        nothing = introspect(everything)[5]
        assert nothing.nullable is True

    def test_plain_types_not_nullable(self) -> None:
        assert introspect(get_info)[0].nullable is False

    def test_keyword_only(self) -> None:
        specs = introspect(search)
        assert [s.keyword_only for s in specs] == [False, False, False, True]

    def test_annotated_unwrapped(self) -> None:
        (spec,) = introspect(with_annotated)
        assert spec.kind == "int"
        assert spec.annotation is int

    def test_object_kind(self) -> None:
        _, filters = introspect(with_object)
        assert filters.kind == "object"
        assert filters.is_object is True
        assert filters.annotation is Filter

    def test_bound_method_skips_self(self) -> None:
        class Controller:
            def show(self, item_id: int) -> None:
                pass

        specs = introspect(Controller().show)
        assert [s.name for s in specs] == ["item_id"]

    @pytest.mark.parametrize(
        "handler", [unannotated, with_any, with_union, with_args, with_kwargs, unresolvable]
    )
    def test_unsupported(self, handler: Any) -> None:
        with pytest.raises(UnsupportedParameter):
            introspect(handler)

    def test_unsupported_names_param(self) -> None:
        with pytest.raises(UnsupportedParameter) as exc_info:
            introspect(with_union)
        assert exc_info.value.param == "value"

    def test_lazy_iteration(self) -> None:
        specs = iter_parameters(bad_then_good)
        assert next(specs).name == "first"
        with pytest.raises(UnsupportedParameter):
            next(specs)

    def test_spec_frozen(self) -> None:
        spec = ParameterSpec(name="x", kind="int", annotation=int)
        with pytest.raises(AttributeError):
            spec.name = "y"  # type: ignore[misc]

    def test_missing_repr(self) -> None:
        assert repr(MISSING) == "MISSING"


class TestLookupKey:
    def test_snake(self) -> None:
        assert lookup_key("userId", snake_params=True) == "user_id"

    def test_verbatim(self) -> None:
        assert lookup_key("userId", snake_params=False) == "userId"

    def test_separator(self) -> None:
        assert lookup_key("userId", snake_params=True, separator="-") == "user-id"


class TestBindArguments:
    def test_snake_key_coerced(self) -> None:
        bound = bind_arguments(get_info, {"user_id": "7"})
        assert bound == BoundArguments(args=(7,), kwargs={})

    def test_camel_keys_when_snake_off(self) -> None:
        bound = bind_arguments(get_info, {"userId": 7}, snake_params=False)
        assert bound.args == (7,)

    def test_camel_key_ignored_when_snake_on(self) -> None:
        with pytest.raises(MissingParameter) as exc_info:
            bind_arguments(get_info, {"userId": 7})
        assert exc_info.value.param == "user_id"

    def test_defaults_and_keyword_only(self) -> None:
        bound = bind_arguments(search, {"query": "birds", "strict": True})
        assert bound.args == ("birds", 1, None)
        assert bound.kwargs == {"strict": True}

    def test_nullable_explicit_none(self) -> None:
        bound = bind_arguments(search, {"query": "birds", "ratio": None})
        assert bound.args[2] is None

    def test_nullable_without_default(self) -> None:
        bound = bind_arguments(with_optional, {})
        assert bound.args == (None,)

    def test_none_for_required_param_is_missing(self) -> None:
        with pytest.raises(MissingParameter) as exc_info:
            bind_arguments(get_info, {"user_id": None})
        assert exc_info.value.param == "user_id"

    def test_none_falls_back_to_default(self) -> None:
        bound = bind_arguments(search, {"query": "birds", "page": None})
        assert bound.args == ("birds", 1, None)

    def test_none_for_keyword_only_uses_default(self) -> None:
        bound = bind_arguments(search, {"query": "birds", "strict": None})
        assert bound.kwargs == {"strict": False}

    def test_missing_required(self) -> None:
        with pytest.raises(MissingParameter):
            bind_arguments(search, {"page": 2})

    def test_type_mismatch_aborts(self) -> None:
        with pytest.raises(TypeMismatch) as exc_info:
            bind_arguments(search, {"query": "birds", "page": "2.5"})
        assert exc_info.value.param == "page"

    def test_first_error_in_declaration_order(self) -> None:
        # query is missing and page is malformed; query comes first
        with pytest.raises(MissingParameter):
            bind_arguments(search, {"page": "x"})

    def test_binding_error_before_unsupported_param(self) -> None:
        with pytest.raises(MissingParameter):
            bind_arguments(bad_then_good, {})

    def test_all_kinds(self) -> None:
        params = {
            "name": 5,
            "tags": ["a"],
            "meta": {"k": 1},
            "active": False,
            "score": "1.5e2",
            "nothing": None,
            "always": True,
            "never": False,
        }
        bound = bind_arguments(everything, params)
        assert bound.args == ("5", ["a"], {"k": 1}, False, 150.0, None, True, False)

    def test_params_not_mutated(self) -> None:
        params = {"query": "birds"}
        bind_arguments(search, params)
        assert params == {"query": "birds"}


class TestObjectParameters:
    def test_built_from_whole_bag(self) -> None:
        bound = bind_arguments(with_object, {"user_id": 3, "status": "closed", "limit": "5"})
        user_id, filters = bound.args
        assert user_id == 3
        assert isinstance(filters, Filter)
        assert filters.status == "closed"
        assert filters.limit == 5

    def test_built_even_when_bag_has_no_matching_key(self) -> None:
        bound = bind_arguments(with_object, {"user_id": 3})
        assert bound.args[1].status == "open"

    def test_bindable_mixin_passes_bag_to_constructor(self) -> None:
        spec = ParameterSpec(name="pagination", kind="object", annotation=Pagination)
        result = bind_parameter(spec, "pagination", {"page": "4"})
        assert isinstance(result, Pagination)
        assert result.page == 4

    def test_construction_error_propagates_unchanged(self) -> None:
        spec = ParameterSpec(name="filters", kind="object", annotation=BrokenFilter)
        with pytest.raises(FilterConstructionError, match="cannot build from"):
            bind_parameter(spec, "filters", {"status": "x"})

    def test_constructor_key_error_propagates(self) -> None:
        spec = ParameterSpec(name="pagination", kind="object", annotation=Pagination)
        with pytest.raises(KeyError):
            bind_parameter(spec, "pagination", {})

    def test_class_without_from_params(self) -> None:
        spec = ParameterSpec(name="plain", kind="object", annotation=Plain)
        with pytest.raises(UnsupportedType) as exc_info:
            bind_parameter(spec, "plain", {})
        assert "from_params" in str(exc_info.value)

    def test_non_class_annotation(self) -> None:
        spec = ParameterSpec(name="value", kind="object", annotation=Literal["a"])
        with pytest.raises(UnsupportedType):
            bind_parameter(spec, "value", {"value": "a"})

    def test_protocol_check(self) -> None:
        assert isinstance(Filter, FromParams)
        assert isinstance(Pagination, FromParams)
        assert not isinstance(Plain, FromParams)
