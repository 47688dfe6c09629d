"""
Post-processing hooks for drf-spectacular schema generation.
"""

HTTP_METHODS = ("get", "post", "put", "patch", "delete")


def _envelope(schema, success: bool) -> dict:
    payload = schema or {"type": "object", "nullable": True}
    return {
        "type": "object",
        "properties": {
            "success": {"type": "boolean", "description": "Indicates if the request was successful"},
            "data": payload if success else {"type": "object", "nullable": True},
            "error": {"type": "object", "nullable": True} if success else payload,
        },
        "required": ["success", "data", "error"],
    }


def wrap_with_envelope(result, generator, request, public):
    """
    Wrap every application/json response schema in the envelope written by
    ``ApiResponseWrapperMiddleware``: 2xx payloads go under ``data``, other
    payloads under ``error``.
    """
    if not isinstance(result, dict):
        return result

    for path_item in result.get("paths", {}).values():
        for method, operation in path_item.items():
            if method not in HTTP_METHODS:
                continue
            for status_code, response_def in operation.get("responses", {}).items():
                json_content = response_def.get("content", {}).get("application/json")
                if json_content is None:
                    continue
                schema = json_content.get("schema", {})
                if {"success", "data", "error"} <= set(schema.get("properties", {})):
                    continue
                json_content["schema"] = _envelope(schema, str(status_code).startswith("2"))
    return result
