from datetime import datetime, timezone
from flask import Flask, jsonify
from flask_cors import CORS
from flasgger import Swagger
from edumanage.config import settings
from edumanage.config import database
from edumanage.routes.configuration_routes import configuration_bp
from edumanage.routes.auth_routes import auth_bp
from edumanage.swagger_template import SWAGGER_TEMPLATE
from edumanage.app_logger import get_logger

logger = get_logger("app")


def create_app(overrides=None, mongo_db=None, redis_client=None):
    """
    Builds the Flask app. Tests pass `mongo_db` (mongomock) and leave redis
    disabled through `overrides`.
    """
    app = Flask(__name__)
    app.config.update(settings.as_dict())
    app.config.update(overrides or {})
    # Avoid trailing-slash redirects ("Redirect not allowed for preflight" in CORS)
    app.url_map.strict_slashes = False

    CORS(
        app,
        origins=[app.config["CLIENT_URL"]],
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        supports_credentials=True,
    )

    if mongo_db is not None:
        database.use_mongo(mongo_db)
    else:
        database.connect_mongo(app.config["MONGO_URI"], app.config["MONGO_DB"])

    if redis_client is not None:
        database.use_redis(redis_client)
    elif app.config["REDIS_ENABLED"]:
        database.connect_redis(app.config["REDIS_HOST"], app.config["REDIS_PORT"], app.config["REDIS_DB"])
    else:
        database.use_redis(None)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(configuration_bp, url_prefix='/api/configurations')

    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({"message": "Server is running!",
                        "timestamp": datetime.now(timezone.utc).isoformat()})

    @app.errorhandler(404)
    def not_found(_e):
        return jsonify({"message": "Route not found"}), 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error("Unhandled error: %s", e)
        return jsonify({"message": "Something went wrong!"}), 500

    # OpenAPI documentation at /apidocs
    Swagger(app, template=SWAGGER_TEMPLATE)

    return app
