"""
CORS Middleware

The web client lives on a single origin and sends credentials, so the
stock Starlette middleware is used with one tweak: a successful
preflight is answered with 204 No Content instead of 200 "OK".
"""

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization", "Accept"]


class PreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose successful preflight status is 204."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response

        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)
