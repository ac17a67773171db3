# gleam_api/__init__.py

# =====================================================================================
# 1. Environment variables (loaded before anything reads os.getenv)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Module imports
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, MethodNotAllowed
import firebase_admin
from firebase_admin import credentials

# - Settings
from gleam_api.core.config import config_by_name
from gleam_api.core.errors import GleamAPIError, InternalError, MethodNotAllowedError

# - API blueprints
from gleam_api.api.analysis.routes import analysis_bp
from gleam_api.api.history.routes import history_bp
from gleam_api.api.plan.routes import plan_bp

# - Services
from gleam_api.services.openai_service import OpenAIService
from gleam_api.services.firestore_service import ScanRepository
from gleam_api.api.analysis.services import AnalysisService
from gleam_api.api.history.services import HistoryService
from gleam_api.api.plan.services import PlanService


def _init_firebase(app: Flask):
    if firebase_admin._apps:
        return

    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if cred_path:
        if not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase credentials file not found: {cred_path}")
        firebase_admin.initialize_app(credentials.Certificate(cred_path))
    else:
        # Application default credentials (Cloud Run, Cloud Functions, gcloud auth).
        firebase_admin.initialize_app()


def create_app(config_name=None, openai_client=None, scan_repository=None):
    """
    Flask application factory.

    :param config_name: key of config_by_name; FLASK_ENV (default 'development') when omitted
    :param openai_client: object exposing ``chat.completions.create``; a real OpenAI client when omitted
    :param scan_repository: scan store; a Firestore-backed ScanRepository when omitted
    """
    # =====================================================================================
    # 3. Flask app and configuration
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    CORS(app, origins=app.config['CORS_ORIGINS'])

    # =====================================================================================
    # 4. Services stored on app.services (dependency injection)
    # =====================================================================================
    app.services = {}

    # 4-1. Outbound clients shared by the domain services
    try:
        openai_instance = OpenAIService(client=openai_client)
        openai_instance.init_app(app)
        app.services['openai'] = openai_instance
    except Exception as e:
        logging.error(f"Failed to initialize OpenAI service: {e}")
        raise

    if scan_repository is None:
        try:
            _init_firebase(app)
            scan_repository = ScanRepository(collection_name=app.config['SCAN_COLLECTION'])
        except Exception as e:
            logging.error(f"Failed to initialize Firestore scan repository: {e}")
            raise
    app.services['scans'] = scan_repository

    # 4-2. Domain services
    app.services['analysis'] = AnalysisService(
        openai_service=app.services['openai'],
        scan_repository=app.services['scans'],
        temperature=app.config['ANALYZE_TEMPERATURE'],
        max_tokens=app.config['ANALYZE_MAX_TOKENS']
    )
    app.services['history'] = HistoryService(scan_repository=app.services['scans'])
    app.services['plan'] = PlanService(
        openai_service=app.services['openai'],
        temperature=app.config['PLAN_TEMPERATURE'],
        max_tokens=app.config['PLAN_MAX_TOKENS']
    )

    # =====================================================================================
    # 5. Blueprints
    # =====================================================================================
    app.register_blueprint(analysis_bp, url_prefix='/analyze')
    app.register_blueprint(history_bp, url_prefix='/history')
    app.register_blueprint(plan_bp, url_prefix='/plan')

    # =====================================================================================
    # 6. Error handlers: every failure becomes {"error", "message"} JSON
    # =====================================================================================
    @app.errorhandler(GleamAPIError)
    def handle_gleam_error(err):
        if err.status_code >= 500:
            logging.error(f"Request failed ({type(err).__name__}): {err.message}", exc_info=True)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        # werkzeug headers such as Allow are kept; only the HTML content type is replaced.
        headers = [(name, value) for name, value in err.get_headers() if name.lower() != 'content-type']
        if isinstance(err, MethodNotAllowed):
            return jsonify(MethodNotAllowedError().to_dict()), 405, headers
        return jsonify({"error": err.name, "message": err.description}), err.code, headers

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # Anything not handled above, including Firestore failures.
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        return jsonify(InternalError().to_dict()), 500

    # =====================================================================================
    # 7. Logging
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
