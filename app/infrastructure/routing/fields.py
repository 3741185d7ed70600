"""Route fields which may be scalar or keyed by localization.

A route's pattern, match, reverse, defaults and group name are either a
single value shared by every localization or a mapping from routing
locale key to value.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Scalar(Generic[T]):
    """One value shared by every localization."""

    value: T

    def get(self, key: Optional[str] = None) -> T:
        return self.value


@dataclass(frozen=True)
class PerLocale(Generic[T]):
    """Values keyed by routing locale key, in configuration order."""

    values: Dict[str, T] = field(default_factory=dict)

    def get(self, key: Optional[str] = None) -> Optional[T]:
        return self.values.get(key)

    def first_key(self) -> Optional[str]:
        return next(iter(self.values), None)

    def keys(self):
        return self.values.keys()


RouteField = Union[Scalar[T], PerLocale[T]]


def route_field(raw: Any) -> RouteField:
    """Coerce a raw configuration value into a route field.

    Args:
        raw: Scalar value, mapping of locale key to value, or an existing
            route field.

    Returns:
        Scalar or PerLocale route field.
    """
    if isinstance(raw, (Scalar, PerLocale)):
        return raw
    if isinstance(raw, Mapping):
        return PerLocale(dict(raw))
    return Scalar(raw)


def is_localized(*fields: RouteField) -> bool:
    """Return True when any field is keyed by localization."""
    return any(isinstance(item, PerLocale) for item in fields)


def is_route_config_localized(config: Mapping[str, Any]) -> bool:
    """Return True when a route config has a localized pattern, match or reverse."""
    return any(
        isinstance(config.get(name), Mapping) for name in ("pattern", "match", "reverse")
    )
