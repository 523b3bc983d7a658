from flask import jsonify, request

from ..exceptions import ValidationError


def envelope(data=None, message: str = "Success", result: bool = True, status: int = 200):
    """Every API answer is {"message", "result", "data"}."""
    return jsonify({"message": message, "result": result, "data": data}), status


def failure(message: str, status: int):
    return envelope(None, message=message, result=False, status=status)


def json_body() -> dict:
    """The request's JSON object; a missing or unparsable body reads as {}."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body
