import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Settings shared by every environment"""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    DEBUG = os.getenv("DEBUG", "True") == "True"

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI", "sqlite:///codetracker.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Browser origins allowed to call /api and /auth with credentials
    CORS_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")

    # OAuth redirect flows end at FRONTEND_URL/auth/callback
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")

    # Canned ai_insights, time_analysis, favorite_topics and next_milestones
    ANALYTICS_INCLUDE_PLACEHOLDERS = os.getenv("ANALYTICS_INCLUDE_PLACEHOLDERS", "True") == "True"


class DevelopmentConfig(Config):
    DEBUG = True
    SESSION_COOKIE_SECURE = False


class ProductionConfig(Config):
    """HTTPS only; the frontend may be served from another domain"""

    DEBUG = False

    # SameSite=None is needed for a cross-site frontend and requires Secure
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "None")

    # Flask-Login "remember me" cookie follows the session cookie
    REMEMBER_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_SECURE = True
    REMEMBER_COOKIE_SAMESITE = SESSION_COOKIE_SAMESITE
    REMEMBER_COOKIE_DURATION = 2592000  # 30 days

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_size": 10,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
    }


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SESSION_COOKIE_SECURE = False
    ANALYTICS_INCLUDE_PLACEHOLDERS = True


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
