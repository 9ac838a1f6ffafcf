"""Waypoint dispatcher.

Mutable during setup (forbidden methods, controller providers).
Frozen when ``dispatch()`` or ``resolve()`` is first invoked.
"""

import inspect
import logging
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Self

from waypoint.binding.binder import bind_arguments
from waypoint.config import DispatchConfig
from waypoint.errors import ConfigurationError, RouteError
from waypoint.routing.resolvers import ControllerResolver, ImportResolver
from waypoint.routing.target import RouteTarget, resolve_target

logger = logging.getLogger("waypoint.dispatch")

# Lifecycle methods no request may reach, whatever the configuration adds
DEFAULT_FORBIDDEN_METHODS: frozenset[str] = frozenset({"__init__", "__new__", "__call__", "__del__"})


def _instantiate(cls: type) -> Any:
    return cls()


class Dispatcher:
    """Resolve a controller path and action, bind the request bag, and call the handler.

    Usage::

        dispatcher = Dispatcher.configure("app.controllers")
        dispatcher.set_forbidden_methods({"boot"})
        dispatcher.dispatch("user-profile", "get_info", {"user_id": 7})
        # -> app.controllers.UserProfileController().getInfo(7)

    The controller instance comes from a provider registered with
    ``provide()``, else from *container* (any ``Callable[[type], object]``),
    else from calling the class with no arguments.  Errors raised by any of
    these, or by the handler, propagate unchanged.

    Thread safety:
        Setup is single-threaded.  The first ``dispatch()``/``resolve()``
        freezes the dispatcher under a lock; after that only immutable state
        is shared and concurrent dispatches need no synchronization.
    """

    __slots__ = (
        "_container",
        "_forbidden",
        "_freeze_lock",
        "_frozen",
        "_providers",
        "_resolver",
        "config",
    )

    def __init__(
        self,
        config: DispatchConfig | None = None,
        *,
        resolver: ControllerResolver | None = None,
        container: Callable[[type], Any] | None = None,
    ) -> None:
        self.config: DispatchConfig = config or DispatchConfig()
        _validate_config(self.config)
        self._resolver: ControllerResolver = resolver or ImportResolver(
            prefix=self.config.namespace,
            separator=self.config.namespace_separator,
        )
        self._container: Callable[[type], Any] = container or _instantiate
        self._providers: dict[type, Callable[[], Any]] = {}
        self._forbidden: set[str] | frozenset[str] = set(
            DEFAULT_FORBIDDEN_METHODS | self.config.forbidden_methods
        )
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    @classmethod
    def configure(
        cls,
        namespace: str,
        separators: str | Sequence[str] = ("-", "_"),
        snake_params: bool = True,
        *,
        resolver: ControllerResolver | None = None,
        container: Callable[[type], Any] | None = None,
        **options: Any,
    ) -> Self:
        """Build a dispatcher from a namespace, separators, and the naming policy.

        Extra keyword *options* are passed to ``DispatchConfig``
        (``namespace_separator``, ``controller_suffix``, ...).
        """
        if isinstance(separators, str):
            separators = (separators,)
        config = DispatchConfig(
            namespace=namespace,
            separators=tuple(separators),
            snake_params=snake_params,
            **options,
        )
        return cls(config, resolver=resolver, container=container)

    # -- Setup --

    def set_forbidden_methods(self, methods: Iterable[str]) -> Self:
        """Add *methods* to the deny-list. The built-in entries always stay."""
        self._check_not_frozen()
        if isinstance(methods, str):
            methods = (methods,)
        self._forbidden.update(methods)  # type: ignore[union-attr]
        return self

    @property
    def forbidden_methods(self) -> frozenset[str]:
        return frozenset(self._forbidden)

    def provide(self, controller: type, factory: Callable[[], Any]) -> None:
        """Register a zero-argument factory for one controller class.

        Consulted before the container::

            dispatcher.provide(ReportController, lambda: ReportController(store))
        """
        self._check_not_frozen()
        self._providers[controller] = factory

    # -- Dispatch --

    def resolve(self, controller_path: str, action: str) -> RouteTarget:
        """Return the ``RouteTarget`` for *controller_path* and *action*."""
        self._ensure_frozen()
        return resolve_target(controller_path, action, self.config)

    def dispatch(self, controller_path: str, action: str, params: Mapping[str, Any]) -> Any:
        """Call the handler for *controller_path*/*action* with values bound from *params*.

        Returns whatever the handler returns.

        Raises ``RouteError`` if the method is forbidden, missing, or not public.
        Raises a ``BindingError`` subclass for the first parameter that fails.
        """
        target = self.resolve(controller_path, action)
        controller = self._check_target(target)
        logger.debug("Dispatching %s", target)

        instance = self._instantiate(controller)
        handler = getattr(instance, target.method_name)
        bound = bind_arguments(
            handler,
            params,
            snake_params=self.config.snake_params,
            separator=self.config.param_separator,
        )
        return handler(*bound.args, **bound.kwargs)

    def _check_target(self, target: RouteTarget) -> type:
        """Run the guard checks in order and return the controller class."""
        method = target.method_name
        if method in self._forbidden:
            logger.warning("Refused forbidden method %s", target)
            msg = f"The {method} method is not accessible in {target.class_name}"
            raise RouteError(msg, target=target)

        controller = self._resolver.lookup(target.class_name)
        if controller is None or not _declares(controller, method):
            msg = f"{target} does not exist"
            raise RouteError(msg, target=target)

        if method.startswith("_"):
            logger.warning("Refused non-public method %s", target)
            msg = f"The method {method} is not public"
            raise RouteError(msg, target=target)

        return controller

    def _instantiate(self, controller: type) -> Any:
        provider = self._providers.get(controller)
        if provider is not None:
            return provider()
        return self._container(controller)

    # -- Freeze --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._forbidden = frozenset(self._forbidden)
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the dispatcher after it has started dispatching. "
                "Register forbidden methods and providers first."
            )
            raise ConfigurationError(msg)


def _declares(cls: type, name: str) -> bool:
    """True if *cls* (or a base) defines a routine called *name*.

    Only the class's own MRO is searched; metaclass methods such as
    ``type.mro`` are not reachable from an instance.
    """
    attr = next((vars(klass)[name] for klass in cls.__mro__ if name in vars(klass)), None)
    return isinstance(attr, (staticmethod, classmethod)) or inspect.isroutine(attr)


def _validate_config(config: DispatchConfig) -> None:
    if any(not sep for sep in config.separators):
        msg = "Separators must be non-empty strings."
        raise ConfigurationError(msg)
    if not config.namespace_separator or config.namespace_separator == "/":
        msg = f"Invalid namespace separator: {config.namespace_separator!r}"
        raise ConfigurationError(msg)
