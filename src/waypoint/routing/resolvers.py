"""Controller resolvers — controller identifier to controller class.

A resolver is any object with ``lookup(identifier) -> type | None``.  Two
are provided:

- ``ImportResolver`` imports the identifier as a dotted path
  (``app.controllers.UserProfileController``).
- ``ControllerRegistry`` is an explicit table filled at startup, for
  identifiers that are not importable paths (``App\\Http\\UserController``).
"""

import importlib
from collections.abc import Callable, Iterator, Mapping
from typing import Protocol, TypeVar

from waypoint.errors import ConfigurationError

C = TypeVar("C", bound=type)


class ControllerResolver(Protocol):
    """Protocol for controller lookup. ``None`` means "no such controller"."""

    def lookup(self, identifier: str) -> type | None: ...


class ImportResolver:
    """Resolve dotted identifiers by importing the longest module prefix.

    ``app.controllers.Admin.UserController`` imports ``app.controllers`` (after
    failing on ``app.controllers.Admin``) and then walks ``Admin.UserController``
    as attributes, so nested classes work.

    Set *prefix* to refuse anything outside one package::

        ImportResolver(prefix="app.controllers")
    """

    __slots__ = ("_prefix", "_separator")

    def __init__(self, *, prefix: str = "", separator: str = ".") -> None:
        self._prefix = prefix
        self._separator = separator

    def lookup(self, identifier: str) -> type | None:
        if self._prefix and not identifier.startswith(self._prefix + self._separator):
            return None

        parts = identifier.split(self._separator)
        if not all(part.isidentifier() for part in parts):
            return None

        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                module = importlib.import_module(module_name)
            except ModuleNotFoundError as exc:
                # Only skip when the missing module is this candidate or a parent of it;
                # a module that exists but fails its own imports propagates.
                if exc.name and (module_name == exc.name or module_name.startswith(exc.name + ".")):
                    continue
                raise

            obj: object = module
            for attr in parts[split:]:
                obj = getattr(obj, attr, None)
                if obj is None:
                    return None
            return obj if isinstance(obj, type) else None

        return None


class ControllerRegistry:
    """Explicit identifier-to-class table.

    Filled during setup, read during dispatch::

        registry = ControllerRegistry()

        @registry.controller("App\\\\Http\\\\Controllers\\\\UserProfileController")
        class UserProfileController: ...
    """

    __slots__ = ("_controllers",)

    def __init__(self, controllers: Mapping[str, type] | None = None) -> None:
        self._controllers: dict[str, type] = {}
        for identifier, cls in (controllers or {}).items():
            self.register(identifier, cls)

    def register(self, identifier: str, cls: type) -> None:
        """Register *cls* under *identifier*.

        Raises ``ConfigurationError`` if *identifier* already maps to a
        different class.
        """
        existing = self._controllers.get(identifier)
        if existing is not None and existing is not cls:
            msg = f"Duplicate controller identifier: {identifier!r}"
            raise ConfigurationError(msg)
        self._controllers[identifier] = cls

    def controller(self, identifier: str) -> Callable[[C], C]:
        """Decorator form of ``register``."""

        def decorator(cls: C) -> C:
            self.register(identifier, cls)
            return cls

        return decorator

    def lookup(self, identifier: str) -> type | None:
        """Look up a controller by identifier. Returns ``None`` if not found."""
        return self._controllers.get(identifier)

    def __len__(self) -> int:
        return len(self._controllers)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._controllers

    def __iter__(self) -> Iterator[str]:
        return iter(self._controllers)
