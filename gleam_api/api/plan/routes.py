# gleam_api/api/plan/routes.py
from flask import Blueprint, request, jsonify, current_app

plan_bp = Blueprint('plan_bp', __name__)


@plan_bp.route('', methods=['POST'], strict_slashes=False)
def create_plan():
    """
    Personalized care plan.

    Body: {"history"?: [PlanHistorySnapshot]} with the newest scan first.
    Without usable history the fixed default plan is returned and no model call is made.
    """
    service = current_app.services['plan']
    payload = request.get_json(silent=True)
    return jsonify(service.generate_plan(payload)), 200
