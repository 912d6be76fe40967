"""
Issue and verify signed access and refresh credentials.

Credentials are JWTs signed with RS256. Each carries the claims ``iss``,
``sub``, ``iat``, ``exp`` and ``user_id``. The class of the credential
(access or refresh) is carried in the ``sub`` claim, so a single verification
step checks both the signature and the class: turning an access token into a
refresh token means forging the signature, not just editing a field.

.. code-block:: python

   keys = KeyPair.from_files('keys/private.pem', 'keys/public.pem')
   engine = CredentialEngine(keys)
   token = engine.issue(42, TokenClass.ACCESS)
   assert engine.verify(token, TokenClass.ACCESS) == 42

"""

from typing import NamedTuple, Union, Dict, Any, Annotated
from abc import ABC, abstractmethod
from datetime import timedelta
import logging

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from . import util
from .domain import TokenClass
from .exceptions import InvalidToken, ExpiredToken, MalformedClaim, \
    SigningFailed, KeyLoadFailed

logger = logging.getLogger(__name__)

ALGORITHM = 'RS256'
ISSUER = 'login-auth'
SUBJECTS: Dict[TokenClass, str] = {
    TokenClass.ACCESS: 'access-token',
    TokenClass.REFRESH: 'refresh-token',
}
LIFETIMES: Dict[TokenClass, timedelta] = {
    TokenClass.ACCESS: timedelta(minutes=30),
    TokenClass.REFRESH: timedelta(hours=72),
}
REQUIRED_CLAIMS = ['iss', 'sub', 'iat', 'exp']


class Claims(BaseModel):
    """Claims carried by a credential."""

    model_config = ConfigDict(extra='ignore')

    iss: str
    sub: str
    iat: Annotated[int, Field(strict=True)]
    exp: Annotated[int, Field(strict=True)]
    user_id: Annotated[int, Field(strict=True, ge=0)]
    """The account to which the credential is bound."""


class KeyPair(NamedTuple):
    """RSA keys used to sign (private) and verify (public) credentials."""

    private_key: rsa.RSAPrivateKey
    public_key: rsa.RSAPublicKey

    @classmethod
    def from_pem(cls, private_pem: Union[str, bytes],
                 public_pem: Union[str, bytes]) -> 'KeyPair':
        """
        Load a keypair from PEM-encoded key blocks.

        Raises
        ------
        :class:`.KeyLoadFailed`
            Raised if either block cannot be parsed, if the keys are not RSA
            keys, or if the public key does not belong to the private key.

        """
        if isinstance(private_pem, str):
            private_pem = private_pem.encode('ascii')
        if isinstance(public_pem, str):
            public_pem = public_pem.encode('ascii')
        try:
            private_key = serialization.load_pem_private_key(private_pem,
                                                             password=None)
            public_key = serialization.load_pem_public_key(public_pem)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise KeyLoadFailed('Could not parse PEM key material') from e

        if not isinstance(private_key, rsa.RSAPrivateKey) \
                or not isinstance(public_key, rsa.RSAPublicKey):
            raise KeyLoadFailed(f'{ALGORITHM} requires an RSA keypair')
        if private_key.public_key().public_numbers() \
                != public_key.public_numbers():
            raise KeyLoadFailed('Public key does not match private key')
        return cls(private_key, public_key)

    @classmethod
    def from_files(cls, private_path: str, public_path: str) -> 'KeyPair':
        """Load a keypair from two PEM files."""
        try:
            with open(private_path, 'rb') as f:
                private_pem = f.read()
            with open(public_path, 'rb') as f:
                public_pem = f.read()
        except OSError as e:
            raise KeyLoadFailed(f'Could not read key files: {e}') from e
        return cls.from_pem(private_pem, public_pem)


class TokenIssuer(ABC):
    """Something that mints credentials bound to an account."""

    @abstractmethod
    def issue(self, account_id: int, token_class: TokenClass) -> str:
        """Mint a credential of ``token_class`` for ``account_id``."""

    def issue_access(self, account_id: int) -> str:
        """Mint an access credential."""
        return self.issue(account_id, TokenClass.ACCESS)

    def issue_refresh(self, account_id: int) -> str:
        """Mint a refresh credential."""
        return self.issue(account_id, TokenClass.REFRESH)


class TokenVerifier(ABC):
    """Something that verifies credentials and extracts the account."""

    @abstractmethod
    def verify(self, token: Union[str, bytes], token_class: TokenClass) -> int:
        """Verify ``token`` as ``token_class`` and get its account ID."""


class CredentialEngine(TokenIssuer, TokenVerifier):
    """Signs and verifies credentials with a :class:`.KeyPair`."""

    def __init__(self, keys: KeyPair, clock: util.Clock = util.now) -> None:
        self._keys = keys
        self._clock = clock

    def issue(self, account_id: int, token_class: TokenClass) -> str:
        """
        Mint a signed credential.

        Parameters
        ----------
        account_id : int
            Must be a non-negative integer.
        token_class : :class:`.TokenClass`

        Returns
        -------
        str
            The compact, signed JWT.

        Raises
        ------
        :class:`.SigningFailed`
            Raised if the claims cannot be built or signing fails.

        """
        issued_at = util.epoch(self._clock())
        try:
            claims = Claims(
                iss=ISSUER,
                sub=SUBJECTS[token_class],
                iat=issued_at,
                exp=issued_at + int(LIFETIMES[token_class].total_seconds()),
                user_id=account_id
            )
        except (KeyError, ValidationError) as e:
            raise SigningFailed(f'Could not build claims: {e}') from e

        try:
            token: str = jwt.encode(claims.model_dump(),
                                    self._keys.private_key,
                                    algorithm=ALGORITHM)
        except (jwt.exceptions.PyJWTError, TypeError, ValueError) as e:
            raise SigningFailed(f'Could not sign token: {e}') from e
        logger.debug('Issued %s token for account %s', token_class.value,
                     account_id)
        return token

    def claims(self, token: Union[str, bytes],
               token_class: TokenClass) -> Claims:
        """
        Verify a credential and get its claims.

        Raises
        ------
        :class:`.InvalidToken`
            Raised if the signature, issuer or subject are not valid.
        :class:`.ExpiredToken`
            Raised if the credential has expired.
        :class:`.MalformedClaim`
            Raised if the claims are not of the expected shape; notably, if
            ``user_id`` is missing or is not a non-negative integer.

        """
        # Expiry is checked below against the injected clock.
        options = {'verify_exp': False, 'verify_iat': False,
                   'require': REQUIRED_CLAIMS}
        try:
            data: Dict[str, Any] = jwt.decode(token, self._keys.public_key,
                                              algorithms=[ALGORITHM],
                                              issuer=ISSUER, options=options)
        except jwt.exceptions.InvalidTokenError as e:
            logger.debug('Token failed verification: %s', e)
            raise InvalidToken('Not a valid token') from e

        if data.get('sub') != SUBJECTS[token_class]:
            logger.debug('Expected a %s token', token_class.value)
            raise InvalidToken(f'Not a {token_class.value} token')

        try:
            claims = Claims.model_validate(data)
        except ValidationError as e:
            raise MalformedClaim(f'Token claims are malformed: {e}') from e

        if util.epoch(self._clock()) >= claims.exp:
            raise ExpiredToken('Token has expired')
        return claims

    def verify(self, token: Union[str, bytes], token_class: TokenClass) -> int:
        """Verify a credential and get the ID of the account it is bound to."""
        return self.claims(token, token_class).user_id
