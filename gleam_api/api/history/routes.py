# gleam_api/api/history/routes.py
from flask import Blueprint, request, jsonify, current_app

from gleam_api.core.errors import NotFoundError

history_bp = Blueprint('history_bp', __name__)

# Every method is routed here so that anything other than GET /latest is a 404, not a 405.
ROUTED_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']


@history_bp.route('/latest', methods=ROUTED_METHODS)
def get_latest_scan():
    """Result of the most recently stored analysis."""
    if request.method != 'GET':
        raise NotFoundError()

    service = current_app.services['history']
    return jsonify(service.latest_result()), 200


@history_bp.route('', defaults={'subpath': ''}, methods=ROUTED_METHODS)
@history_bp.route('/<path:subpath>', methods=ROUTED_METHODS)
def unknown_history_path(subpath: str):
    raise NotFoundError()
