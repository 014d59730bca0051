"""
Controller Base Class

Controllers own a repository and a fixed set of actions. The action list
and the authenticated-action set are resolved once, when the controller is
constructed, into an immutable tuple of BoundActions.
"""

from typing import Any, Dict, FrozenSet, Generic, Iterable, Optional, Tuple, TypeVar
import logging

from .action import Action, BoundAction
from .decorators import ROUTE_METADATA_ATTR
from .dispatcher import ActionDispatcher
from ..faults import ActionDeclarationFault


R = TypeVar("R")

logger = logging.getLogger("switchyard.controller")


class Controller(Generic[R]):
    """
    Base Controller class.

    Actions can be declared three ways, merged in this order:
    - decorated methods (``@GET("/items")``)
    - the class attribute ``actions``
    - the ``actions`` constructor argument

    Authenticated actions are the union of ``authenticated=True`` decorated
    methods, the class attribute ``authenticated_actions`` and the
    ``authenticated_actions`` constructor argument. Every name must match a
    declared action.

    Example:
        class ItemsController(Controller[ItemRepo]):
            authenticated_actions = frozenset({"create"})

            @GET("/items")
            async def list(self, request, response):
                return HTTPResponse({"items": self.repository.all()})

            @POST("/items")
            async def create(self, request, response):
                item = self.repository.add(await request.json())
                return HTTPResponse(item, 201)
    """

    actions: Tuple[Action, ...] = ()
    authenticated_actions: FrozenSet[str] = frozenset()

    def __init__(
        self,
        repository: R,
        actions: Optional[Iterable[Action]] = None,
        authenticated_actions: Optional[Iterable[str]] = None,
    ):
        self.repository = repository

        declared, decorated_auth = self._collect_decorated()
        declared.extend(type(self).actions)
        declared.extend(actions or ())

        auth_names = (
            set(decorated_auth)
            | set(type(self).authenticated_actions)
            | set(authenticated_actions or ())
        )

        self.actions: Tuple[Action, ...] = tuple(declared)
        self.authenticated_actions: FrozenSet[str] = frozenset(auth_names)
        self.bindings: Tuple[BoundAction, ...] = self._bind(self.actions, self.authenticated_actions)

    # -- Declaration ------------------------------------------------------

    @classmethod
    def _collect_decorated(cls) -> Tuple[list, set]:
        """Read route metadata from decorated methods, base classes first."""
        functions: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if hasattr(value, ROUTE_METADATA_ATTR):
                    functions[name] = value
                elif name in functions:
                    # Overridden without a decorator: no longer a route.
                    del functions[name]

        declared = []
        authenticated = set()
        for name, func in functions.items():
            for meta in getattr(func, ROUTE_METADATA_ATTR):
                declared.append(Action(meta["http_method"], meta["path"], name))
                if meta["authenticated"]:
                    authenticated.add(name)
        return declared, authenticated

    def _bind(
        self,
        actions: Tuple[Action, ...],
        authenticated: FrozenSet[str],
    ) -> Tuple[BoundAction, ...]:
        seen = set()
        bindings = []
        for action in actions:
            key = (action.method, action.path)
            if key in seen:
                raise ActionDeclarationFault(
                    f"{type(self).__name__} declares {action.method.value} {action.path} more than once"
                )
            seen.add(key)

            if hasattr(Controller, action.handler_name):
                raise ActionDeclarationFault(
                    f"{type(self).__name__} cannot route to framework method '{action.handler_name}'"
                )
            handler = getattr(self, action.handler_name, None)
            if not callable(handler):
                raise ActionDeclarationFault(
                    f"{type(self).__name__} has no handler method '{action.handler_name}'"
                )
            bindings.append(BoundAction(action, handler, action.handler_name in authenticated))

        names = {action.handler_name for action in actions}
        unknown = sorted(authenticated - names)
        if unknown:
            raise ActionDeclarationFault(
                f"{type(self).__name__} marks undeclared actions as authenticated: {', '.join(unknown)}"
            )

        return tuple(bindings)

    # -- Registration -----------------------------------------------------

    def register_actions(self, server: Any) -> int:
        """Register every bound action with ``server``. Returns the count."""
        dispatcher = ActionDispatcher(self.bindings, name=type(self).__name__)
        count = dispatcher.register(server)
        logger.info(f"Registered {count} action(s) for {type(self).__name__}")
        return count
