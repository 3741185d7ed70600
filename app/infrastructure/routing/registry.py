"""Route registry grouping routes by localization and group name.

Routes are indexed by name (and controller action) for URL building, and
partitioned into groups for matching. Group keys are ``""`` for ungrouped
routes, the group name for single-group routes and ``"<locale key>/<group>"``
for every entry of a per-locale group name mapping.
"""

import threading
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import structlog

from infrastructure.localization.exceptions import (
    CompositionError,
    DuplicateRouteError,
    RouteGroupMismatchError,
)
from infrastructure.routing.reverse import match_path
from infrastructure.routing.route import GroupName, Route, create_route

logger = structlog.get_logger().bind(component="routing.registry")

RouteFactory = Callable[[Mapping[str, Any]], Route]
RoutesInput = Union[
    Mapping[str, Union[Route, Mapping[str, Any]]],
    Iterable[Union[Route, Mapping[str, Any]]],
]


def group_keys_for(group_name: GroupName) -> List[str]:
    """Return the group keys implied by a route's group name assignment.

    Args:
        group_name: None, a group name or a ``{locale key: group}`` mapping.

    Returns:
        List of group keys.
    """
    if group_name is None:
        return [""]
    if isinstance(group_name, str):
        return [group_name]
    return [f"{key}/{name}" for key, name in group_name.items()]


class RouteGroupRegistry:
    """Thread-safe registry of routes by name and by group.

    Removing a route takes it out of its groups (so it is no longer matched)
    but keeps it in the name index, so URLs can still be built for it.

    Attributes:
        pre_route_matching_handler: Optional hook run before matching; when
            set, ``any_routes_configured`` stays True without routes.
    """

    def __init__(self):
        self._routes: Dict[str, Route] = {}
        self._url_routes: Dict[str, Route] = {}
        self._groups: Dict[str, Dict[str, Route]] = {}
        self._lock = threading.RLock()
        self.pre_route_matching_handler: Optional[Callable[..., Any]] = None
        self._any_routes_configured = False

    @property
    def any_routes_configured(self) -> bool:
        return self._any_routes_configured or self.pre_route_matching_handler is not None

    def add_route(
        self,
        route: Union[Route, Mapping[str, Any]],
        name: Optional[str] = None,
        group_names: GroupName = None,
        prepend: bool = False,
        throw_on_duplicate: bool = True,
        route_factory: Optional[RouteFactory] = None,
    ) -> Route:
        """Register a single route.

        Args:
            route: Route instance or route configuration.
            name: Explicit route name overriding the route's own name.
            group_names: Group name or per-locale group name mapping.
            prepend: Insert before existing group members.
            throw_on_duplicate: Raise on duplicate name or controller action,
                otherwise overwrite silently.
            route_factory: Factory used to create routes from configuration.

        Returns:
            The registered Route.

        Raises:
            DuplicateRouteError: If the route exists and duplicates are disallowed.
            RouteGroupMismatchError: If group names do not fit the route.
        """
        instance = create_route(route, route_factory)
        if name is not None:
            instance.name = name
        route_name = instance.name
        controller_action = instance.controller_action

        with self._lock:
            if throw_on_duplicate:
                if route_name in self._url_routes:
                    raise DuplicateRouteError(
                        f"Route with name '{route_name}' already exists",
                        route_name=route_name,
                    )
                if controller_action != ":" and controller_action in self._url_routes:
                    raise DuplicateRouteError(
                        f"Route with controller action '{controller_action}' "
                        "already exists",
                        route_name=route_name,
                    )

            existing = self._routes.get(route_name)
            if existing is not None:
                self._remove_from_groups(existing)

            self._assign_group_name(instance, group_names)
            if prepend:
                self._routes = {route_name: instance, **self._routes}
            else:
                self._routes[route_name] = instance
            self._url_routes[route_name] = instance
            if controller_action != ":":
                self._url_routes[controller_action] = instance
            self._add_to_groups(instance, prepend)
            self._any_routes_configured = True

        logger.debug(
            "route_added",
            route=route_name,
            localized=instance.localized,
            group_keys=group_keys_for(instance.group_name),
        )
        return instance

    def add_routes(
        self,
        routes: RoutesInput,
        group_names: GroupName = None,
        prepend: bool = False,
        throw_on_duplicate: bool = True,
        route_factory: Optional[RouteFactory] = None,
    ) -> List[Route]:
        """Register several routes.

        Mapping keys are used as route names. When prepending, the batch
        keeps its own order in front of the existing group members.

        Args:
            routes: Mapping of name to route/config, or iterable of routes/configs.
            group_names: Group name or per-locale group names for every route.
            prepend: Insert the batch before existing group members.
            throw_on_duplicate: Raise on duplicates instead of overwriting.
            route_factory: Factory used for every route config in this batch.

        Returns:
            Registered routes in the given order.
        """
        if isinstance(routes, Mapping):
            items = [(name, route) for name, route in routes.items()]
        else:
            items = [(None, route) for route in routes]

        ordered = list(reversed(items)) if prepend else items
        added = []
        with self._lock:
            for name, route in ordered:
                if name is not None and isinstance(route, Mapping) and "name" not in route:
                    route = {**route, "name": name}
                    name = None
                added.append(
                    self.add_route(
                        route,
                        name=name,
                        group_names=group_names,
                        prepend=prepend,
                        throw_on_duplicate=throw_on_duplicate,
                        route_factory=route_factory,
                    )
                )
        return list(reversed(added)) if prepend else added

    def set_routes(
        self,
        routes: RoutesInput,
        group_names: GroupName = None,
        auto_initialize: bool = True,
        route_factory: Optional[RouteFactory] = None,
    ) -> None:
        """Replace the whole route table in one pass.

        Args:
            routes: Routes to register.
            group_names: Group name or per-locale group names for every route.
            auto_initialize: Create routes from configs through ``add_routes``.
                When False, routes must be Route instances and are indexed
                as given, using their own group names unless ``group_names``
                is passed.
            route_factory: Factory used for route configs.
        """
        with self._lock:
            self._routes = {}
            self._url_routes = {}
            self._groups = {}
            self._any_routes_configured = False
            if auto_initialize:
                self.add_routes(routes, group_names, route_factory=route_factory)
            else:
                instances = (
                    list(routes.values()) if isinstance(routes, Mapping) else list(routes)
                )
                for route in instances:
                    if group_names is not None:
                        self._assign_group_name(route, group_names)
                    self._routes[route.name] = route
                    self._url_routes[route.name] = route
                    if route.controller_action != ":":
                        self._url_routes[route.controller_action] = route
                    self._add_to_groups(route, prepend=False)
                self._any_routes_configured = bool(instances)

        logger.info(
            "routes_set",
            routes_count=len(self._routes),
            groups=list(self._groups),
            any_routes_configured=self.any_routes_configured,
        )

    def remove_route(self, route_name: str) -> Optional[Route]:
        """Remove a route from matching.

        The route stays in the name index so URLs can still be built.

        Args:
            route_name: Route name.

        Returns:
            Removed Route, or None if it was not registered.
        """
        with self._lock:
            route = self._routes.pop(route_name, None)
            if route is None:
                return None
            self._remove_from_groups(route)
        logger.debug("route_removed", route=route_name)
        return route

    def routes_for_group(
        self, group_key: str = "", include_non_localized: bool = True
    ) -> Dict[str, Route]:
        """Return routes of a group key in insertion order.

        Args:
            group_key: ``""``, group name or ``"<locale key>/<group>"``.
            include_non_localized: Keep non-localized routes in the result.

        Returns:
            Ordered mapping of route name to Route (a copy).
        """
        with self._lock:
            routes = dict(self._groups.get(group_key, {}))
        if include_non_localized:
            return routes
        return {name: route for name, route in routes.items() if route.localized}

    def find_route_by_path(
        self, path: str, include_non_localized: bool = True
    ) -> Optional[Tuple[Route, Optional[str], Dict[str, str]]]:
        """Find the route whose reverse template produces a request path.

        Routes are tried in registration order; localized routes are tried
        per locale key in configuration order. Removed routes are skipped.

        Args:
            path: Request path.
            include_non_localized: Also try non-localized routes.

        Returns:
            Tuple of (route, locale key or None, path params), or None.
        """
        for route in self.get_routes().values():
            if route.localized:
                keys: List[Optional[str]] = list(route.locale_keys())
            elif include_non_localized:
                keys = [None]
            else:
                continue
            for key in keys:
                try:
                    data = route.reverse_data_for(key)
                except CompositionError as e:
                    logger.debug(
                        "route_without_reverse_skipped", route=route.name, error=str(e)
                    )
                    break
                params = match_path(data.template, path)
                if params is not None:
                    return route, key, params
        return None

    def get_route(self, name_or_controller_action: str) -> Optional[Route]:
        """Find a route by name or by ``"Controller:action"``."""
        with self._lock:
            return self._url_routes.get(name_or_controller_action)

    def get_routes(self) -> Dict[str, Route]:
        with self._lock:
            return dict(self._routes)

    def group_keys(self) -> List[str]:
        with self._lock:
            return list(self._groups)

    def _assign_group_name(self, route: Route, group_names: GroupName) -> None:
        if group_names is None:
            if isinstance(route.group_name, Mapping) and not route.localized:
                raise RouteGroupMismatchError(
                    f"Non-localized route '{route.name}' cannot have localized "
                    "group names",
                    route_name=route.name,
                )
            return
        if isinstance(group_names, str):
            if isinstance(route.group_name, Mapping):
                raise RouteGroupMismatchError(
                    f"Route '{route.name}' has localized group names and cannot "
                    f"be assigned to the single group '{group_names}'",
                    route_name=route.name,
                )
        elif not route.localized:
            raise RouteGroupMismatchError(
                "Localized routes group cannot contain non-localized route "
                f"'{route.name}' (group names: {dict(group_names)})",
                route_name=route.name,
            )
        else:
            group_names = dict(group_names)
        route.set_group_name(group_names)

    def _add_to_groups(self, route: Route, prepend: bool) -> None:
        for key in group_keys_for(route.group_name):
            group = self._groups.get(key, {})
            if prepend:
                group = {route.name: route, **group}
            else:
                group[route.name] = route
            self._groups[key] = group

    def _remove_from_groups(self, route: Route) -> None:
        for key in group_keys_for(route.group_name):
            group = self._groups.get(key)
            if group is not None:
                group.pop(route.name, None)
