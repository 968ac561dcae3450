# fechamento/utils/http.py
from flask import request

from ..errors import ValidationError


def json_body() -> dict:
    """Request JSON as a dict; a missing or unparsable body is {}, any other JSON type is a 400."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
