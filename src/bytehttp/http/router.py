"""
=============================================================================
TARGET ROUTER
=============================================================================

Dispatches a request to a handler by looking only at its target. The
method is ignored here; handlers that care (the /files handler) check it
themselves.

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Incoming Request                                                   │
    │   GET /echo/abc                                                      │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ROUTER (ordered, first match wins)                          │   │
    │   │                                                              │   │
    │   │  exact("/")            → root                                │   │
    │   │  exact("/user-agent")  → user_agent                          │   │
    │   │  prefix("/echo")       → echo            ← MATCH!            │   │
    │   │  prefix("/files")      → FileHandler.handle                  │   │
    │   │                                                              │   │
    │   │  no match              → 404 Not Found                       │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   echo(request)                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PREDICATES
=============================================================================

A route is a (predicate, handler) pair. Predicates are plain callables
from target string to bool, so anything can be a route condition:

    exact("/user-agent")     target == "/user-agent"
    prefix("/echo")          target.startswith("/echo")
                             (matches "/echo", "/echo/x", "/echoes" alike;
                             the handler enforces the "/echo/" cut point)
    lambda t: t.endswith(".txt")

Adding a route never means editing an existing one.

=============================================================================
INTERVIEW QUESTIONS ABOUT ROUTING
=============================================================================

Q: "Why a list and not a dict keyed by path?"
A: "Prefix routes can't be dict keys. A list of predicates handles exact,
   prefix and arbitrary matches uniformly, and order gives a simple,
   predictable precedence rule."

Q: "What's the time complexity of route matching?"
A: "O(R) predicate calls for R routes. With four routes that is nothing;
   a segment trie would be the next step if the table grew large."

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, List, Optional
import logging

from .errors import HTTPError
from .request import HTTPRequest
from .response import HTTPResponse, error_response, not_found


logger = logging.getLogger(__name__)


# Handler: takes a request, returns a response. Class-based handlers
# register their bound `handle` method.
Handler = Callable[[HTTPRequest], HTTPResponse]

# Predicate: decides from the raw target whether a route applies.
Predicate = Callable[[str], bool]


def exact(path: str) -> Predicate:
    """Predicate matching one target exactly."""
    def predicate(target: str) -> bool:
        return target == path
    predicate.__name__ = f"exact({path!r})"
    return predicate


def prefix(path: str) -> Predicate:
    """Predicate matching every target that starts with `path`."""
    def predicate(target: str) -> bool:
        return target.startswith(path)
    predicate.__name__ = f"prefix({path!r})"
    return predicate


@dataclass
class Route:
    """
    A registered route.

        Route(
            predicate=prefix("/echo"),   # decides if the route applies
            handler=echo,                # produces the response
            name="echo",                 # for logs and debugging
        )
    """

    predicate: Predicate
    handler: Handler
    name: Optional[str] = None


class Router:
    """
    Ordered (predicate, handler) table.

    Register with add_route() or the decorators:

        router = Router()

        @router.exact("/")
        def root(request):
            return ok()

        @router.prefix("/echo")
        def echo(request):
            ...

        router.add_route(prefix("/files"), FileHandler(config).handle)
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        predicate: Predicate,
        handler: Handler,
        name: Optional[str] = None,
    ) -> Route:
        """
        Append a route. Earlier routes take precedence.

        Args:
            predicate: Callable deciding from the target whether to match.
            handler: Callable producing the response.
            name: Optional label, defaults to the handler's name.
        """
        route = Route(
            predicate=predicate,
            handler=handler,
            name=name or getattr(handler, "__name__", None),
        )
        self._routes.append(route)
        logger.debug(f"Registered route {route.name} for {getattr(predicate, '__name__', predicate)}")
        return route

    def exact(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator registering a handler for one exact target."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(exact(path), handler, name)
            return handler
        return decorator

    def prefix(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator registering a handler for every target under `path`."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(prefix(path), handler, name)
            return handler
        return decorator

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, target: str) -> Optional[Route]:
        """First route whose predicate accepts `target`, or None."""
        for route in self._routes:
            if route.predicate(target):
                return route
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request and return the handler's response.

        1. Find the first matching route (none → 404)
        2. Call its handler
        3. An HTTPError raised by the handler becomes its error response

        Anything other than HTTPError propagates to the server, which
        logs it and answers 500.
        """
        route = self.match(request.target)
        if route is None:
            return not_found()

        try:
            return route.handler(request)
        except HTTPError as e:
            logger.debug(f"{route.name} raised {type(e).__name__}: {e}")
            return error_response(e)

    def routes(self) -> List[Route]:
        """All registered routes, in precedence order."""
        return list(self._routes)
