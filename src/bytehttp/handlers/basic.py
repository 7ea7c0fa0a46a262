"""
Stateless endpoint handlers.

Each is a pure function of the request:

    /              → 200, empty
    /user-agent    → 200 with the User-Agent value, 400 without one
    /echo/<text>   → 200 with <text>, 400 when nothing follows "/echo/"
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, bad_request, ok


ECHO_PREFIX = "/echo/"


def root(request: HTTPRequest) -> HTTPResponse:
    return ok()


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """
    Echo back the User-Agent header.

    The lookup is exact-case: a client sending "user-agent" gets 400.
    """
    agent = request.user_agent
    if agent is None:
        return bad_request()
    return ok(agent)


def echo(request: HTTPRequest) -> HTTPResponse:
    """
    Return everything after "/echo/" as a text/plain body.

        /echo/abc   → "abc"
        /echo/a/b   → "a/b"
        /echo/      → 400 (nothing to echo)
        /echo       → 400
    """
    target = request.target
    if len(target) < len(ECHO_PREFIX) + 1:
        return bad_request()
    return ok(target[len(ECHO_PREFIX):])
