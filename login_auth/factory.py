"""Provides an app factory for the login service."""

from typing import Optional, Dict, Any
import logging

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

from . import routes
from .app_logging import setup_logger
from .mail import SMTPNotifier
from .sessions import SessionService
from .store import SQLAccountStore
from .tokens import CredentialEngine, KeyPair

logger = logging.getLogger(__name__)


def jsonify_exception(error: HTTPException) -> Response:
    exc_resp = error.get_response()
    response: Response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response


def create_web_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Initialize an instance of the login service.

    Signing keys are loaded here, once; if they cannot be loaded the app
    cannot start, and :class:`.KeyLoadFailed` is raised.
    """
    app = Flask('login_auth')
    app.config.from_object('login_auth.config')
    if config:
        app.config.update(config)
    if app.config['LOG_JSON']:
        setup_logger(app.config['LOG_LEVEL'])

    keys = KeyPair.from_files(app.config['JWT_PRIVATE_KEY_PATH'],
                              app.config['JWT_PUBLIC_KEY_PATH'])
    engine = CredentialEngine(keys)
    store = SQLAccountStore.from_uri(app.config['DATABASE_URI'])
    store.create_all()
    notifier = SMTPNotifier(app.config['SMTP_HOST'], app.config['SMTP_PORT'],
                            app.config['MAIL_SENDER'])
    app.extensions['login_auth'] = {
        'store': store,
        'verifier': engine,
        'sessions': SessionService(store, notifier, engine, engine)
    }

    app.register_blueprint(routes.blueprint)
    app.register_error_handler(HTTPException, jsonify_exception)
    logger.info('Login service ready')
    return app
