"""
Protect Flask routes with access credentials.

.. code-block:: python

   from flask import g
   from login_auth.decorators import authenticated


   @blueprint.route('/things', methods=['GET'])
   @authenticated
   def list_things():
       return things.for_account(g.user_id)


When the decorated route is called, the ``Authorization: Bearer <token>``
header is verified as an access credential. If that works, the ID of the
account is set as ``flask.g.user_id`` and the route is called; otherwise
:class:`Unauthorized` is raised. The reason is never given to the client.
"""

from typing import Callable, Any, Optional
from functools import wraps
import logging

from flask import current_app, g, request
from werkzeug.exceptions import Unauthorized

from .domain import TokenClass
from .exceptions import InvalidToken, MalformedClaim
from .tokens import TokenVerifier

INVALID_TOKEN = 'Invalid authorization token'

logger = logging.getLogger(__name__)


def current_verifier() -> TokenVerifier:
    """Get the :class:`.TokenVerifier` attached to the current app."""
    verifier: TokenVerifier = current_app.extensions['login_auth']['verifier']
    return verifier


def bearer_token() -> Optional[str]:
    """Get the bearer token from the request, if there is one."""
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        logger.debug('Auth header malformed')
        return None
    return parts[1]


def authenticated(func: Callable) -> Callable:
    """Require a valid access credential to call ``func``."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        token = bearer_token()
        if token is None:
            raise Unauthorized(INVALID_TOKEN)
        try:
            g.user_id = current_verifier().verify(token, TokenClass.ACCESS)
        except (InvalidToken, MalformedClaim) as e:
            logger.debug('Access token rejected: %s', e)
            raise Unauthorized(INVALID_TOKEN) from e
        return func(*args, **kwargs)
    return wrapper
