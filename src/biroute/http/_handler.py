"""Request handler adapter — route an HttpRequest and invoke its handler.

The adapter owns nothing but the glue: it extracts the path and
attributes, calls match_route, and hands the augmented request to the
resolved handler. Response construction belongs to the handler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from biroute._errors import RouteError
from biroute._routes import match_route

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from biroute._routes import Route
    from biroute.http._request import HttpRequest

logger = logging.getLogger(__name__)

type RequestHandler = Callable[[HttpRequest], Any]


def make_handler(
    routes: Route,
    handlers: Mapping[Any, RequestHandler] | None = None,
) -> RequestHandler:
    """Create a request handler from a route tree.

    With ``handlers``, a matched handler id is looked up there; without,
    the handler id must itself be callable. The returned function gives
    None when the request does not route anywhere.

    Raises (from the returned function):
        RouteError: The matched handler id cannot be invoked.
    """

    def handle(request: HttpRequest) -> Any:
        found = match_route(request.path, routes, request.attributes())
        if found is None:
            logger.debug("%s %s did not match any route", request.method, request.path)
            return None

        target = _handler_for(found.handler, handlers)
        logger.debug(
            "%s %s routed to %r with %s",
            request.method,
            request.path,
            found.handler,
            dict(found.params),
        )
        return target(request.with_route_params(found.params))

    return handle


def _handler_for(
    handler_id: Any, handlers: Mapping[Any, RequestHandler] | None
) -> RequestHandler:
    if handlers is not None:
        try:
            return handlers[handler_id]
        except KeyError:
            msg = f"no request handler registered for {handler_id!r}"
            raise RouteError(msg) from None
    if not callable(handler_id):
        msg = f"handler {handler_id!r} is not callable and no handlers mapping was given"
        raise RouteError(msg)
    return handler_id
