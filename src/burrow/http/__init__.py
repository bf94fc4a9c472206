"""HTTP request and response types handed to route handlers."""

from burrow.http.headers import Headers
from burrow.http.query import QueryParams
from burrow.http.request import Request
from burrow.http.response import Response, ResponseAlreadySentError

__all__ = ["Headers", "QueryParams", "Request", "Response", "ResponseAlreadySentError"]
