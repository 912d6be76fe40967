"""
Storage of account records.

:class:`AccountStore` is the interface that the rest of the package relies
upon. :class:`SQLAccountStore` implements it with SQLAlchemy; each call runs
in its own short-lived session, so a store instance can be shared between
concurrent requests.
"""

from typing import Generator, Optional
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from . import util
from .domain import Account, AccountState
from .exceptions import NoSuchAccount, RegistrationFailed
from .models import Base, DBAccount

logger = logging.getLogger(__name__)


class AccountStore(ABC):
    """Reads and writes :class:`.Account` records."""

    @abstractmethod
    def find_by_email(self, email: str) -> Account:
        """
        Get an account by e-mail address.

        Raises
        ------
        :class:`.NoSuchAccount`

        """

    @abstractmethod
    def find_by_id(self, account_id: int) -> Account:
        """
        Get an account by ID.

        Raises
        ------
        :class:`.NoSuchAccount`

        """

    @abstractmethod
    def insert_pending(self, account: Account) -> Account:
        """Store a new pending account, and return it with its ID."""

    @abstractmethod
    def delete(self, account_id: int) -> None:
        """Delete an account."""

    @abstractmethod
    def mark_active(self, account_id: int, when: datetime) -> Account:
        """
        Set an account active as of ``when``, and return it.

        Raises
        ------
        :class:`.NoSuchAccount`

        """


class SQLAccountStore(AccountStore):
    """Keeps accounts in a SQL database."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_uri(cls, uri: str) -> 'SQLAccountStore':
        """Create a store backed by the database at ``uri``."""
        logger.debug('New database engine for %s', uri.split('://', 1)[0])
        return cls(create_engine(uri))

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """Context manager for database transaction."""
        session = self._sessions()
        try:
            yield session
            # The caller may have committed already; only commit here if
            # anything is left unflushed.
            if session.new or session.dirty or session.deleted:
                session.commit()
        except Exception as e:
            logger.error('Commit failed, rolling back: %s', str(e))
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create all tables in the database."""
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        """Drop all tables in the database."""
        Base.metadata.drop_all(self.engine)

    def is_available(self) -> bool:
        """Check our connection to the database."""
        try:
            with self.transaction() as session:
                session.execute(text('SELECT 1'))
        except Exception as e:
            logger.error('Encountered an error talking to database: %s', e)
            return False
        return True

    def find_by_email(self, email: str) -> Account:
        with self.transaction() as session:
            db_account = session.query(DBAccount) \
                .filter(DBAccount.email == email) \
                .first()
        if db_account is None:
            raise NoSuchAccount('Account does not exist')
        return db_account.to_domain()

    def find_by_id(self, account_id: int) -> Account:
        with self.transaction() as session:
            db_account = session.get(DBAccount, account_id)
        if db_account is None:
            raise NoSuchAccount(f'No account with id {account_id}')
        return db_account.to_domain()

    def insert_pending(self, account: Account) -> Account:
        db_account = DBAccount(
            email=account.email,
            password_enc=account.password_hash,
            salt=account.salt,
            activation_secret=account.activation_secret,
            state=AccountState.PENDING.value,
            created_at=util.epoch(account.created_at),
            updated_at=util.epoch(account.updated_at)
        )
        try:
            with self.transaction() as session:
                session.add(db_account)
                session.commit()
        except IntegrityError as e:
            raise RegistrationFailed('Could not create account') from e
        logger.debug('Stored pending account %s', db_account.account_id)
        return db_account.to_domain()

    def delete(self, account_id: int) -> None:
        with self.transaction() as session:
            session.query(DBAccount) \
                .filter(DBAccount.account_id == account_id) \
                .delete()
            session.commit()
        logger.debug('Deleted account %s', account_id)

    def mark_active(self, account_id: int, when: datetime) -> Account:
        db_account: Optional[DBAccount]
        with self.transaction() as session:
            db_account = session.get(DBAccount, account_id)
            if db_account is not None:
                db_account.state = AccountState.ACTIVE.value
                db_account.updated_at = util.epoch(when)
                session.commit()
        if db_account is None:
            raise NoSuchAccount(f'No account with id {account_id}')
        logger.debug('Account %s is now active', account_id)
        return db_account.to_domain()
