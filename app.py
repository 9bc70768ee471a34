from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_mail import Mail
import logging
from logging.handlers import RotatingFileHandler

from config import Config

db = SQLAlchemy()
mail = Mail()


def create_app(config_class=Config, processor=None, storage=None):
    """Application factory.

    `processor` and `storage` replace the PayPal and S3 clients built from
    config; tests pass fakes here.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    mail.init_app(app)

    # --- Logging ---
    log_formatter = logging.Formatter('%(asctime)s %(levelname)s %(funcName)s(%(lineno)d) %(message)s')
    if not app.debug and not app.testing:
        file_handler = RotatingFileHandler(app.config['LOG_FILE'], maxBytes=1024 * 1024 * 5, backupCount=2)
        file_handler.setFormatter(log_formatter)
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

    app.logger.setLevel(logging.INFO)

    config_class.init_app(app)

    # --- Blueprints, services and CLI ---
    from beatstore import beatstore_bp, services, commands
    app.register_blueprint(beatstore_bp, url_prefix='/api')
    services.init_app(app, processor=processor, storage=storage)
    commands.init_app(app)

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    with app.app_context():
        db.create_all()

    app.logger.info('Beat store started')
    return app
