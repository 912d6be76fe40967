"""
Coordinates accounts and credentials into the user-facing operations.

:class:`SessionService` is what the HTTP layer calls. Exceptions from the
store, the notifier, :mod:`.accounts` and :mod:`.tokens` are passed through
unchanged; it is up to the caller to decide what the client gets to see.
"""

from typing import NamedTuple, Union
from datetime import datetime
import logging

from . import accounts, util
from .domain import Account, TokenClass
from .exceptions import InactiveAccount
from .mail import Notifier
from .store import AccountStore
from .tokens import TokenIssuer, TokenVerifier, LIFETIMES

logger = logging.getLogger(__name__)


class LoginTokens(NamedTuple):
    """Credentials issued at login."""

    access_token: str
    refresh_token: str
    """Opaque renewal handle; the client must replay it verbatim."""

    refresh_expires: datetime
    """When :attr:`.refresh_token` stops working."""


class SessionService(object):
    """Pre-registration, activation, login and credential renewal."""

    def __init__(self, store: AccountStore, notifier: Notifier,
                 issuer: TokenIssuer, verifier: TokenVerifier,
                 clock: util.Clock = util.now) -> None:
        self._store = store
        self._notifier = notifier
        self._issuer = issuer
        self._verifier = verifier
        self._clock = clock

    def pre_register(self, email: str, password: str) -> Account:
        """
        Create a pending account and send its activation secret.

        If sending fails the pending account remains stored, and the error is
        raised; calling this again replaces it with a fresh secret.
        """
        account = accounts.begin_registration(self._store, email, password,
                                              clock=self._clock)
        self._notifier.send_activation_secret(email,
                                              account.activation_secret)
        logger.debug('Pre-registered account %s', account.account_id)
        return account

    def activate(self, email: str, secret: str) -> Account:
        """Activate the pending account for ``email``."""
        account = self._store.find_by_email(email)
        return accounts.activate(self._store, account, secret,
                                 clock=self._clock)

    def login(self, email: str, password: str) -> LoginTokens:
        """Authenticate, and issue an access and a refresh credential."""
        account = self._store.find_by_email(email)
        accounts.authenticate(account, password)
        access_token = self._issuer.issue(account.account_id,
                                          TokenClass.ACCESS)
        refresh_token = self._issuer.issue(account.account_id,
                                           TokenClass.REFRESH)
        logger.debug('Account %s logged in', account.account_id)
        return LoginTokens(
            access_token=access_token,
            refresh_token=refresh_token,
            refresh_expires=self._clock() + LIFETIMES[TokenClass.REFRESH]
        )

    def refresh(self, refresh_token: Union[str, bytes]) -> str:
        """
        Issue a new access credential in exchange for a refresh credential.

        The account must still exist and be active.
        """
        account_id = self._verifier.verify(refresh_token, TokenClass.REFRESH)
        account = self._store.find_by_id(account_id)
        if not account.is_active:
            raise InactiveAccount('Account is not active')
        return self._issuer.issue(account.account_id, TokenClass.ACCESS)

    def get(self, account_id: int) -> Account:
        """Get an account by ID."""
        return self._store.find_by_id(account_id)
