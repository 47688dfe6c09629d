import json

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework import status
from rest_framework.response import Response

API_PATH_PREFIX = "/api/"


class ApiResponseWrapperMiddleware(MiddlewareMixin):
    """Wrap JSON responses of the API in ``{"success", "data", "error"}``.

    Only paths under ``/api/`` are wrapped; the admin, schema and docs pages are left
    alone. Responses without a body (``204 No Content``) keep having none. Empty
    payloads such as an empty completion list stay ``[]`` instead of becoming ``null``.
    """

    def process_response(self, request, response):
        if not request.path.startswith(API_PATH_PREFIX):
            return response
        if response.status_code == status.HTTP_204_NO_CONTENT:
            return response

        if isinstance(response, Response):
            data = response.data
        elif isinstance(response, JsonResponse):
            data = json.loads(response.content)
        else:
            return response

        is_error = bool(getattr(response, "exception", False)) or response.status_code >= 400
        envelope = {
            "success": not is_error,
            "data": None if is_error else data,
            "error": data if is_error else None,
        }
        return JsonResponse(envelope, status=response.status_code, safe=False)
