"""RouteTarget frozen dataclass and target resolution."""

from dataclasses import dataclass

from waypoint.casing import camelize, lcfirst
from waypoint.config import DispatchConfig


@dataclass(frozen=True, slots=True)
class RouteTarget:
    """A resolved controller identifier and method name.

    Deterministic: the same controller path, action, and config always
    produce an equal target.
    """

    class_name: str
    method_name: str

    def __str__(self) -> str:
        return f"{self.class_name}::{self.method_name}"


def controller_identifier(controller_path: str, config: DispatchConfig) -> str:
    """Build the fully-qualified controller identifier for *controller_path*.

    Examples (``separators=("-", "_")``)::

        "user-profile"    -> "<namespace>.UserProfileController"
        "admin/audit_log" -> "<namespace>.Admin.AuditLogController"
    """
    segments = [camelize(part, config.separators) for part in controller_path.split("/")]
    name = config.namespace_separator.join(segments) + config.controller_suffix
    if config.namespace:
        return config.namespace + config.namespace_separator + name
    return name


def method_identifier(action: str, config: DispatchConfig) -> str:
    """Camelize *action* and lower its first letter: ``get_info`` -> ``getInfo``."""
    return lcfirst(camelize(action, config.separators))


def resolve_target(controller_path: str, action: str, config: DispatchConfig) -> RouteTarget:
    return RouteTarget(
        class_name=controller_identifier(controller_path, config),
        method_name=method_identifier(action, config),
    )
