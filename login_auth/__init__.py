"""
Account lifecycle and credential core.

Accounts move from pending registration to active, and active accounts log
in to get a short-lived access credential and a long-lived refresh credential.
Both are JWTs signed with a single RSA keypair, so other services can
authorize requests by checking the signature, with no database lookup.

The parts, from the bottom up:

- :mod:`.tokens` issues and verifies credentials.
- :mod:`.accounts` is the account state machine.
- :mod:`.sessions` puts those together as pre-register, activate, login and
  refresh.

:mod:`.store` and :mod:`.mail` provide storage and e-mail delivery, and
:mod:`.factory` and :mod:`.routes` expose the whole thing over HTTP:

.. code-block:: python

   from login_auth.factory import create_web_app

   app = create_web_app({'DATABASE_URI': 'sqlite:///accounts.db'})

"""

from .domain import Account, AccountState, TokenClass
from .sessions import SessionService, LoginTokens
from .tokens import CredentialEngine, KeyPair
