"""Standardized API response helpers for the reference API.

All JSON endpoints return responses in one envelope format:

    Success: {"success": true, "data": ..., "message": ...}
    Error:   {"success": false, "error": ..., "error_type": ...}

Usage:
    from dashboard.utils.api_response import api_success, api_error

    @bp.route("/protocols")
    def protocols():
        try:
            found = resolver.resolve(request.args["condition"])
            return api_success(data=[p.to_dict() for p in found])
        except InvalidRequest as e:
            return api_error(e, 400)
"""

from flask import jsonify


def api_success(data=None, message=None):
    """Return a standardized success response.

    Returns: {"success": true, "data": ..., "message": ...}
    """
    response = {"success": True}
    if data is not None:
        response["data"] = data
    if message is not None:
        response["message"] = message
    return jsonify(response)


def api_error(error, status_code=400):
    """Return a standardized error response.

    Exceptions also report their class name as ``error_type`` so clients
    can tell a missing drug from a missing dosing rule.

    Returns: {"success": false, "error": ..., "error_type": ...}
    """
    response = {"success": False, "error": str(error)}
    if isinstance(error, Exception):
        response["error_type"] = type(error).__name__
    return jsonify(response), status_code
