"""Dispatcher configuration.

DispatchConfig is a frozen dataclass, read when a Dispatcher is built and
shared unchanged by every dispatch after that.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DispatchConfig:
    """Dispatcher configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = DispatchConfig(namespace="app.controllers", snake_params=False)
    """

    # Route targets
    namespace: str = ""
    namespace_separator: str = "."
    controller_suffix: str = "Controller"
    separators: tuple[str, ...] = ("-", "_")  # Replaced by word breaks when camelizing

    # Parameter naming
    snake_params: bool = True  # Request keys are snake_case, handler params camelCase
    param_separator: str = "_"

    # Methods that can never be dispatched to, on top of the built-in set
    forbidden_methods: frozenset[str] = frozenset()
