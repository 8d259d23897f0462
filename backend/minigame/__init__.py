from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException
import logging
import time
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=flask_app.config.get('CORS_ORIGINS', []))

    # Import and register blueprints here
    from minigame.main import main
    flask_app.register_blueprint(main)

    from minigame.api.auth import auth
    from minigame.api.users import users
    from minigame.api.scores import scores
    # Mount everything under /api to match the frontend API client
    flask_app.register_blueprint(auth, url_prefix='/api')
    flask_app.register_blueprint(users, url_prefix='/api/user')
    flask_app.register_blueprint(scores, url_prefix='/api')

    from minigame.errors import ServiceError

    @flask_app.errorhandler(ServiceError)
    def handle_service_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        if request.path.startswith('/api'):
            return jsonify({'error': exc.description or exc.name}), exc.code
        return exc

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        flask_app.logger.exception(f"[unhandled] {request.method} {request.path}")
        return jsonify({'error': 'Internal server error'}), 500

    # Bearer-token sessions via Flask-Login
    from minigame.services.accounts.sessions import load_user_from_header

    @login_manager.request_loader
    def load_user_from_request(req):
        return load_user_from_header(req.headers.get('Authorization', ''))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Authentication required'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from minigame.services.accounts.registration import register_user
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            for u in ['testuser1', 'testuser2', 'testuser3']:
                register_user(u, 'password', '127.0.0.1')
            print('Database has been reset and seeded!')

    @click.command('sweep-guests')
    @click.option('--loop', is_flag=True,
                  help='Keep running and sweep every GUEST_SWEEP_INTERVAL_SEC seconds.')
    @click.option('--every', type=int, default=None,
                  help='Sweep interval in seconds (implies --loop).')
    def sweep_guests_command(loop, every):
        """Deletes guest accounts older than the retention window."""
        from minigame.errors import StorageError
        from minigame.services.accounts.guests import sweep_expired_guests
        interval = every or (int(flask_app.config.get('GUEST_SWEEP_INTERVAL_SEC', 86400)) if loop else None)
        with flask_app.app_context():
            while True:
                try:
                    removed = sweep_expired_guests()
                    click.echo(f'Removed {removed} expired guest account(s).')
                except StorageError:
                    # Already logged; a supervised loop retries on the next tick
                    if not interval:
                        raise
                if not interval:
                    return
                time.sleep(interval)

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(sweep_guests_command)

    return flask_app
