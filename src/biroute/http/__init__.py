"""biroute.http — HTTP request adapter.

Provides an HttpRequest context whose attributes feed route guards,
and make_handler, which routes a request and invokes the handler.
"""

from biroute.http._handler import RequestHandler, make_handler
from biroute.http._request import HttpRequest

__all__ = [
    # Context
    "HttpRequest",
    # Adapter
    "make_handler",
    "RequestHandler",
]
