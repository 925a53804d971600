import os

from config import config
from flask import Flask, jsonify
from flask_cors import CORS
from flask_login import LoginManager
from flask_migrate import Migrate


def create_app(config_name=None):
    """Application factory pattern"""
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize CORS for the frontend
    allowed_origins = app.config["CORS_ORIGINS"]

    CORS(
        app,
        resources={
            r"/api/*": {"origins": allowed_origins},
            r"/auth/*": {"origins": allowed_origins},
        },
        supports_credentials=True,
    )

    # Initialize SQLAlchemy
    from models import db

    db.init_app(app)

    # Initialize Flask-Migrate
    migrate = Migrate(app, db)

    # Initialize Flask-Login
    login_manager = LoginManager()
    login_manager.init_app(app)

    # Import all models to ensure they are registered with SQLAlchemy
    from models.learning_item import LearningItem
    from models.problem import Problem
    from models.revision_item import RevisionItem
    from models.roadmap import Roadmap
    from models.subtopic import Subtopic
    from models.topic import Topic
    from models.user import User

    # User loader callback for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # JSON 401 instead of a redirect to a login page
    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"success": False, "error": "Authentication required"}), 401

    # Register OAuth blueprints
    from auth.oauth import bp as oauth_bp
    from auth.oauth import github_bp, google_bp

    app.register_blueprint(oauth_bp)
    app.register_blueprint(google_bp, url_prefix="/login")
    app.register_blueprint(github_bp, url_prefix="/login")

    # Register API blueprints
    from routes.analytics import bp as analytics_bp
    from routes.learning import bp as learning_bp
    from routes.problems import bp as problems_bp
    from routes.revisions import bp as revisions_bp
    from routes.roadmaps import bp as roadmaps_bp
    from routes.users import bp as users_bp

    app.register_blueprint(users_bp)
    app.register_blueprint(problems_bp)
    app.register_blueprint(learning_bp)
    app.register_blueprint(revisions_bp)
    app.register_blueprint(roadmaps_bp)
    app.register_blueprint(analytics_bp)

    # Home route
    @app.route("/")
    def home():
        return jsonify({"message": "Welcome to CodeTracker API!", "version": "1.0.0"})

    # Health check route
    @app.route("/health")
    def health_check():
        try:
            db.session.execute(db.text("SELECT 1"))
            return jsonify({"status": "healthy", "database": "connected"}), 200
        except Exception as e:
            app.logger.error(f"Health check failed: {e}")
            return jsonify({"status": "unhealthy", "error": str(e)}), 500

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, port=5001)
