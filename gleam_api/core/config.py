# gleam_api/core/config.py

import os


class Config:
    """Settings shared by every environment."""
    # Secret injected by the hosting platform (or .env for local runs).
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')

    ANALYZE_TEMPERATURE = float(os.getenv('ANALYZE_TEMPERATURE', 0.2))
    ANALYZE_MAX_TOKENS = int(os.getenv('ANALYZE_MAX_TOKENS', 500))
    PLAN_TEMPERATURE = float(os.getenv('PLAN_TEMPERATURE', 0.4))
    PLAN_MAX_TOKENS = int(os.getenv('PLAN_MAX_TOKENS', 600))

    # Without a credentials file firebase_admin falls back to application default credentials.
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    SCAN_COLLECTION = os.getenv('SCAN_COLLECTION', 'scanResults')

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')


class DevelopmentConfig(Config):
    """Local development settings."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)


class TestingConfig(Config):
    """Settings for the pytest suite. External services are always injected as fakes."""
    TESTING = True
    DEBUG = False
    OPENAI_API_KEY = 'test-key'
    SCAN_COLLECTION = 'scanResults-test'


class ProductionConfig(Config):
    DEBUG = False


# create_app picks the class by FLASK_ENV.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
