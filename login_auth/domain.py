"""Defines accounts and credential concepts."""

from typing import Optional
from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class AccountState(str, Enum):
    """Lifecycle states of an :class:`.Account`."""

    PENDING = 'pending'
    """Pre-registered; waiting for the activation secret."""

    ACTIVE = 'active'
    """Activated. This is terminal."""


class TokenClass(str, Enum):
    """Classes of signed credentials."""

    ACCESS = 'access'
    """Short-lived credential that authorizes individual API calls."""

    REFRESH = 'refresh'
    """Long-lived credential used only to obtain new access credentials."""


class Account(BaseModel):
    """A user account, from pre-registration onward."""

    email: str
    """The account holder's e-mail address. Unique, case-sensitive."""

    password_hash: bytes
    """Derived key of the password and :attr:`.salt`."""

    salt: str
    """Random salt used to derive :attr:`.password_hash`."""

    activation_secret: str
    """Secret sent to :attr:`.email` to prove that the holder controls it."""

    created_at: datetime
    updated_at: datetime
    """Last time credential material or state was written."""

    state: AccountState = AccountState.PENDING

    account_id: Optional[int] = None
    """Unique identifier for the account. ``None`` until it is stored."""

    @property
    def is_active(self) -> bool:
        """Whether or not the account has been activated."""
        return self.state == AccountState.ACTIVE
