"""Waypoint — dynamic controller dispatch with strict parameter binding.

Turns a symbolic controller path, an action name, and a flat parameter map
into a call on a controller method, coercing every value to the type the
method declares.

Basic usage::

    from waypoint import Dispatcher

    dispatcher = Dispatcher.configure("app.controllers")
    dispatcher.dispatch("user-profile", "get_info", {"user_id": 7})
    # -> app.controllers.UserProfileController().getInfo(7)
"""

import importlib

__version__ = "0.1.0"

# Public name -> defining module, resolved on first attribute access
_LAZY_IMPORTS: dict[str, str] = {
    "Dispatcher": "waypoint.dispatcher",
    "DispatchConfig": "waypoint.config",
    "RouteTarget": "waypoint.routing.target",
    "ControllerRegistry": "waypoint.routing.resolvers",
    "ImportResolver": "waypoint.routing.resolvers",
    "MISSING": "waypoint.binding.spec",
    "ParameterSpec": "waypoint.binding.spec",
    "introspect": "waypoint.binding.spec",
    "BindableFromParams": "waypoint.binding.protocol",
    "FromParams": "waypoint.binding.protocol",
    "CoercionResult": "waypoint.coercion",
    "coerce": "waypoint.coercion",
    "try_coerce": "waypoint.coercion",
    "camelize": "waypoint.casing",
    "snake": "waypoint.casing",
    "WaypointError": "waypoint.errors",
    "ConfigurationError": "waypoint.errors",
    "RouteError": "waypoint.errors",
    "BindingError": "waypoint.errors",
    "TypeMismatch": "waypoint.errors",
    "UnsupportedType": "waypoint.errors",
    "UnsupportedParameter": "waypoint.errors",
    "MissingParameter": "waypoint.errors",
}

__all__ = sorted(_LAZY_IMPORTS)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(importlib.import_module(module_name), name)
