"""
=============================================================================
MIDDLEWARE INTERFACE
=============================================================================

Cross-cutting steps that wrap the router: access logging and content
negotiation. Chain of Responsibility: each layer either calls the next one
or answers itself, and sees the response on the way back out.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      PIPELINE - REQUEST FLOW                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Request ──────────────────────────────────────────►               │
    │                                                                      │
    │   ┌──────────┐    ┌─────────────┐    ┌──────────────┐               │
    │   │ Logging  │───►│ Compression │───►│ router       │               │
    │   │   MW     │    │     MW      │    │  .handle     │               │
    │   └────┬─────┘    └──────┬──────┘    └──────┬───────┘               │
    │        ▼                 ▼                  ▼                        │
    │   [before]          [before]             [exec]                     │
    │   start timer       (nothing)            route                      │
    │        ▲                 ▲                  │                        │
    │   [after]           [after]                 ▼                        │
    │   access log        set encoding         response                   │
    │                                                                      │
    │   ◄──────────────────────────────────────────── Response            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
INTERVIEW INSIGHT: CHAIN OF RESPONSIBILITY
=============================================================================

Q: "Why is compression a middleware and not part of every handler?"
A: "It depends only on the request's Accept-Encoding and applies to every
   route alike. Handlers stay ignorant of it, and the serializer does the
   actual gzip once the choice has been recorded on the response."

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# The next middleware, or the final handler.
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    A layer around the request handler.

        class Tagging(Middleware):
            def __call__(self, request, next):
                response = next(request)   # continue the chain
                ...                        # post-process
                return response

    Not calling `next` short-circuits the chain.
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request.

        Args:
            request: The incoming HTTP request
            next: The next handler in the chain

        Returns:
            HTTP response (either from next() or short-circuited)
        """

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Ordered middleware around a final handler. First added is outermost.

        pipeline = MiddlewarePipeline()
        pipeline.use(LoggingMiddleware(), CompressionMiddleware())
        handler = pipeline.wrap(router.handle)

        # handler(request) == Logging(Compression(router.handle))(request)
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append one middleware. Returns self for chaining."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        """Append several middleware in order."""
        for mw in middleware:
            self.add(mw)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build the chain around `handler`.

        Given [MW1, MW2] the result is MW1 → MW2 → handler: wrapping runs
        in reverse so the first-added middleware ends up outermost.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(
        self,
        middleware: Middleware,
        next_handler: NextHandler,
    ) -> NextHandler:
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)

        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
