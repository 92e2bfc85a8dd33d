from flask import jsonify


def success(data=None, message="Success", status_code=200):
    """Standard success envelope. Lists also report their length."""
    body = {"status": "success", "message": message, "data": data}
    if isinstance(data, list):
        body["results"] = len(data)
    return jsonify(body), status_code


def iso(value):
    return value.isoformat() if value else None
