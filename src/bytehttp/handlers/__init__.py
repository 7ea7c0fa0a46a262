"""
=============================================================================
HANDLERS MODULE
=============================================================================

The endpoints the server answers.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    REQUEST → HANDLER → RESPONSE                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    Request                 Handler                 Response         │
    │   ┌─────────┐           ┌─────────┐           ┌─────────┐          │
    │   │ GET     │           │         │           │ 200 OK  │          │
    │   │ /echo/  │ ────────▶ │  echo   │ ────────▶ │         │          │
    │   │ abc     │           │         │           │ abc     │          │
    │   └─────────┘           └─────────┘           └─────────┘          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
HANDLER TYPES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Type              │ Use Case                                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │ Function Handler  │ Pure function of the request                   │
    │                   │ root, user_agent, echo                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │ Class Handler     │ Needs configuration resolved at startup        │
    │                   │ FileHandler(config).handle                      │
    └─────────────────────────────────────────────────────────────────────┘

Handlers may return an error response directly or raise an HTTPError;
the router turns the latter into a response.

=============================================================================
"""

from .basic import root, user_agent, echo
from .files import FileHandler

__all__ = [
    "root",
    "user_agent",
    "echo",
    "FileHandler",
]
