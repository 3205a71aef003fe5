# petconnect/__init__.py

# =====================================================================================
# 1. Environment
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Imports
# =====================================================================================
import os
import logging
from typing import Optional
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - config
from petconnect.core.config import config_by_name

# - blueprints
from petconnect.api.auth.routes import auth_bp
from petconnect.api.users.routes import users_bp
from petconnect.api.pets.routes import pets_bp
from petconnect.api.posts.routes import posts_bp
from petconnect.api.comments.routes import comments_bp
from petconnect.api.chats.routes import chats_bp
from petconnect.api.messages.routes import messages_bp
from petconnect.api.notifications.routes import notifications_bp
from petconnect.api.assistant.routes import assistant_bp
from petconnect.api.uploads.routes import uploads_bp

# - services
from petconnect.services import storage_service as storage_service_module
from petconnect.services import notification_service as notification_service_module
from petconnect.services import openai_service as openai_service_module
from petconnect.api.auth import services as auth_service_module
from petconnect.api.users.services import UserService
from petconnect.api.pets.services import PetService
from petconnect.api.posts.services import PostService
from petconnect.api.comments.services import CommentService
from petconnect.api.chats.services import ChatService
from petconnect.api.messages.services import MessageService


def create_app(config_name: Optional[str] = None):
    """
    Flask application factory.

    :param config_name: key of config_by_name; defaults to FLASK_ENV, then 'development'
    """
    # =====================================================================================
    # 3. App and config
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. Extensions and external services
    # =====================================================================================
    jwt = JWTManager(app)

    # Without credentials (tests) firestore.client() is expected to be patched.
    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if cred_path and not firebase_admin._apps:
        if not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase credentials file not found: {cred_path}")
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred, {
            'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
        })

    # =====================================================================================
    # 5. Services, stored on app.services
    # =====================================================================================
    app.services = {}

    # 5-1. shared services
    storage_instance = storage_service_module.StorageService()
    storage_instance.init_app(app)
    app.services['storage'] = storage_instance

    openai_instance = openai_service_module.OpenAIService()
    openai_instance.init_app(app)
    app.services['openai'] = openai_instance

    notification_instance = notification_service_module.NotificationService()
    app.services['notifications'] = notification_instance

    auth_service_module.auth_service.init_app(app)
    app.services['auth'] = auth_service_module.auth_service

    # 5-2. domain services
    app.services['posts'] = PostService(notification_service=notification_instance)
    app.services['comments'] = CommentService(post_service=app.services['posts'])
    app.services['users'] = UserService(post_service=app.services['posts'])
    app.services['pets'] = PetService()
    app.services['messages'] = MessageService()
    app.services['chats'] = ChatService(message_service=app.services['messages'])

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return app.services['auth'].is_token_revoked(jwt_payload)

    # =====================================================================================
    # 6. Blueprints
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(pets_bp, url_prefix='/api/pets')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(comments_bp, url_prefix='/api/comments')
    app.register_blueprint(chats_bp, url_prefix='/api/chats')
    app.register_blueprint(messages_bp, url_prefix='/api/messages')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')
    app.register_blueprint(assistant_bp, url_prefix='/api/ai')
    app.register_blueprint(uploads_bp, url_prefix='/api/uploads')

    @app.route('/')
    def index():
        return jsonify({"message": "PetConnect API is running"}), 200

    # =====================================================================================
    # 7. Global error handlers
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 404/405 and other HTTP errors keep their status
        if isinstance(err, HTTPException):
            return jsonify({"error_code": err.name.upper().replace(' ', '_'), "message": err.description}), err.code
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "An unexpected server error occurred."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. Logging
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
