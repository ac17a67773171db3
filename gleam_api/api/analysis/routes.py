# gleam_api/api/analysis/routes.py
from flask import Blueprint, request, jsonify, current_app

analysis_bp = Blueprint('analysis_bp', __name__)


@analysis_bp.route('', methods=['POST'], strict_slashes=False)
def analyze():
    """
    Analyze a base64-encoded smile photo.

    Body: {"image": str, "tags"?: [str], "previousTakeaways"?: [str], "tagHistory"?: [[str]]}
    """
    service = current_app.services['analysis']
    payload = request.get_json(silent=True)
    return jsonify(service.analyze(payload)), 200
