"""
HTTP routes for registration, login and credential renewal.

Failures are deliberately vague: a client cannot tell an unknown e-mail
address from a wrong password, or an expired credential from a forged one.
"""

from typing import Annotated, Type, TypeVar
import logging

from flask import Blueprint, Response, current_app, g, jsonify, request
from pydantic import BaseModel, Field, ValidationError
from werkzeug.exceptions import BadRequest, Conflict, InternalServerError, \
    NotFound, Unauthorized

from .decorators import authenticated, INVALID_TOKEN
from .exceptions import NoSuchAccount, AlreadyActive, RegistrationFailed, \
    InvalidToken, MalformedClaim, InactiveAccount, AuthenticationFailed, \
    NotificationFailed
from .sessions import SessionService

logger = logging.getLogger(__name__)

blueprint = Blueprint('login_auth', __name__, url_prefix='/api')

EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'
INVALID_CREDENTIALS = 'Invalid credentials'
INVALID_ACTIVATION = 'Invalid or expired activation token'

Email = Annotated[str, Field(pattern=EMAIL_PATTERN, max_length=255)]


class CredentialsRequest(BaseModel):
    """Body of registration and login requests."""

    email: Email
    password: Annotated[str, Field(min_length=6, max_length=20)]


class ActivationRequest(BaseModel):
    """Body of activation requests."""

    email: Email
    token: Annotated[str, Field(min_length=8, max_length=8)]


RequestModel = TypeVar('RequestModel', bound=BaseModel)


def _parse(model: Type[RequestModel]) -> RequestModel:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest('Expected a JSON object')
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.debug('Invalid request body: %s', e)
        raise BadRequest('Invalid request body') from e


def current_sessions() -> SessionService:
    """Get the :class:`.SessionService` attached to the current app."""
    sessions: SessionService = current_app.extensions['login_auth']['sessions']
    return sessions


@blueprint.route('/auth/register/initial', methods=['POST'])
def pre_register() -> Response:
    """Create a pending account and e-mail its activation token."""
    body = _parse(CredentialsRequest)
    try:
        current_sessions().pre_register(body.email, body.password)
    except (AlreadyActive, RegistrationFailed) as e:
        raise Conflict('Account already exists') from e
    except NotificationFailed as e:
        raise InternalServerError('Could not send activation token') from e
    return jsonify({'message': 'ok'})


@blueprint.route('/auth/register/complete', methods=['POST'])
def activate() -> Response:
    """Activate a pending account."""
    body = _parse(ActivationRequest)
    try:
        current_sessions().activate(body.email, body.token)
    except (NoSuchAccount, AlreadyActive, InvalidToken) as e:
        logger.debug('Activation failed: %s', type(e).__name__)
        raise BadRequest(INVALID_ACTIVATION) from e
    return jsonify({'message': 'activate ok'})


@blueprint.route('/auth/login', methods=['POST'])
def login() -> Response:
    """Log in; the refresh token is set as an HTTP-only cookie."""
    body = _parse(CredentialsRequest)
    try:
        tokens = current_sessions().login(body.email, body.password)
    except (NoSuchAccount, InactiveAccount, AuthenticationFailed) as e:
        logger.debug('Login failed: %s', type(e).__name__)
        raise Unauthorized(INVALID_CREDENTIALS) from e

    response: Response = jsonify({'access_token': tokens.access_token})
    response.set_cookie(
        current_app.config['REFRESH_COOKIE_NAME'],
        tokens.refresh_token,
        expires=tokens.refresh_expires,
        httponly=True,
        samesite='Strict',
        secure=current_app.config['REFRESH_COOKIE_SECURE']
    )
    return response


@blueprint.route('/auth/refresh', methods=['GET'])
def refresh() -> Response:
    """Get a new access token in exchange for the refresh cookie."""
    refresh_token = request.cookies.get(
        current_app.config['REFRESH_COOKIE_NAME']
    )
    if not refresh_token:
        raise Unauthorized(INVALID_TOKEN)
    try:
        access_token = current_sessions().refresh(refresh_token)
    except (InvalidToken, MalformedClaim, NoSuchAccount,
            InactiveAccount) as e:
        logger.debug('Refresh failed: %s', type(e).__name__)
        raise Unauthorized(INVALID_TOKEN) from e
    return jsonify({'access_token': access_token})


@blueprint.route('/restricted/user/me', methods=['GET'])
@authenticated
def get_me() -> Response:
    """Describe the authenticated account."""
    try:
        account = current_sessions().get(g.user_id)
    except NoSuchAccount as e:
        raise NotFound('No such account') from e
    return jsonify({
        'id': account.account_id,
        'email': account.email,
        'updated_at': account.updated_at.isoformat(),
        'created_at': account.created_at.isoformat()
    })
