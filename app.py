# app.py
# Flask application factory

import logging
import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import Config
from errors import JudgingError
from extensions import db, migrate
from logging_config import setup_logging

# Import the models here so Flask-Migrate (Alembic) can see them
from models import User, Event, Prize, Criterion, JudgeAssignment, Submission, Rating, WinnerProposal

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    setup_logging(app.config['LOG_LEVEL'])
    # The default SQLite file lives in instance/
    os.makedirs(app.instance_path, exist_ok=True)

    # --- Extensions ---
    db.init_app(app)
    migrate.init_app(app, db)

    # --- Blueprints ---
    from routes.public import public_bp
    from routes.judging import judging_bp
    from routes.organizer import organizer_bp

    app.register_blueprint(public_bp)
    app.register_blueprint(judging_bp)
    app.register_blueprint(organizer_bp)

    register_error_handlers(app)
    return app


def register_error_handlers(app):
    @app.errorhandler(JudgingError)
    def handle_judging_error(error):
        db.session.rollback()
        logger.warning("%s: %s", error.kind, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({
            'success': False,
            'error': error.name.lower().replace(' ', '_'),
            'message': error.description,
        }), error.code
