"""Exceptions raised by the account and credential core."""


class NoSuchAccount(RuntimeError):
    """Account does not exist."""


class AlreadyActive(RuntimeError):
    """An active account already exists, or the account is already active."""


class RegistrationFailed(RuntimeError):
    """The account store refused to create the pending account."""


class InvalidToken(RuntimeError):
    """Token or activation secret is not valid."""


class ExpiredToken(InvalidToken):
    """Token or activation secret has expired."""


class MalformedClaim(RuntimeError):
    """Token signature is fine, but its claims are unusable."""


class InactiveAccount(RuntimeError):
    """Account has not been activated."""


class AuthenticationFailed(RuntimeError):
    """Failed to authenticate user with provided credentials."""


class SigningFailed(RuntimeError):
    """Could not build or sign a token."""


class KeyLoadFailed(RuntimeError):
    """Signing keys could not be loaded."""


class NotificationFailed(RuntimeError):
    """Could not deliver a message to the account holder."""
