"""
The account state machine.

An account is created ``pending`` by :func:`begin_registration`, and becomes
``active`` exactly once, by :func:`activate`. Only active accounts may
:func:`authenticate`. A second registration for a still-pending address
replaces the pending account (and its salt and activation secret) entirely,
so earlier activation secrets stop working.

Nothing here touches cryptographic credentials; see :mod:`.tokens`.
"""

from datetime import timedelta
import hmac
import logging

from . import util
from .domain import Account, AccountState
from .exceptions import NoSuchAccount, AlreadyActive, InvalidToken, \
    ExpiredToken, InactiveAccount
from .passwords import random_string, hash_password, check_password
from .store import AccountStore

logger = logging.getLogger(__name__)

SALT_LENGTH = 30
ACTIVATION_SECRET_LENGTH = 8
ACTIVATION_WINDOW = timedelta(minutes=30)


def begin_registration(store: AccountStore, email: str, password: str,
                       clock: util.Clock = util.now) -> Account:
    """
    Create a new pending account.

    Parameters
    ----------
    store : :class:`.AccountStore`
    email : str
    password : str
        Password (as entered).
    clock : callable
        Returns the current time.

    Returns
    -------
    :class:`.Account`
        The stored pending account, including its activation secret.

    Raises
    ------
    :class:`.AlreadyActive`
        Raised if an active account with ``email`` exists.

    """
    try:
        existing = store.find_by_email(email)
    except NoSuchAccount:
        logger.debug('No prior account; registering')
    else:
        if existing.is_active:
            raise AlreadyActive('An active account already exists')
        logger.debug('Replacing pending account %s', existing.account_id)
        store.delete(existing.account_id)

    salt = random_string(SALT_LENGTH)
    now = clock()
    account = Account(
        email=email,
        password_hash=hash_password(password, salt),
        salt=salt,
        activation_secret=random_string(ACTIVATION_SECRET_LENGTH),
        state=AccountState.PENDING,
        created_at=now,
        updated_at=now
    )
    return store.insert_pending(account)


def activate(store: AccountStore, account: Account, presented_secret: str,
             clock: util.Clock = util.now) -> Account:
    """
    Activate a pending account.

    The secret is valid for :data:`ACTIVATION_WINDOW` after the account was
    last updated.

    Raises
    ------
    :class:`.AlreadyActive`
    :class:`.InvalidToken`
        Raised if ``presented_secret`` does not match.
    :class:`.ExpiredToken`
        Raised if the activation window has passed.

    """
    if account.is_active:
        raise AlreadyActive('Account is already active')
    if not hmac.compare_digest(presented_secret.encode('utf-8'),
                               account.activation_secret.encode('utf-8')):
        logger.debug('Wrong activation secret for %s', account.account_id)
        raise InvalidToken('Invalid activation secret')
    now = clock()
    if now > account.updated_at + ACTIVATION_WINDOW:
        logger.debug('Activation secret for %s expired', account.account_id)
        raise ExpiredToken('Activation secret has expired')
    return store.mark_active(account.account_id, now)


def authenticate(account: Account, password: str) -> None:
    """
    Check that an account may log in with ``password``.

    Raises
    ------
    :class:`.InactiveAccount`
        Raised if the account has not been activated, whatever the password.
    :class:`.AuthenticationFailed`
        Raised if the password is not correct.

    """
    if not account.is_active:
        raise InactiveAccount('Account is not active')
    check_password(password, account.salt, account.password_hash)
