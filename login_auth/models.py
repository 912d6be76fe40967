"""Database models for accounts."""

from sqlalchemy import Column, Integer, LargeBinary, String, text
from sqlalchemy.orm import declarative_base

from . import util
from .domain import Account, AccountState

Base = declarative_base()


class DBAccount(Base):  # type: ignore
    """
    Account table.

    +-------------------+--------------+------+-----+---------+----------------+
    | Field             | Type         | Null | Key | Default | Extra          |
    +-------------------+--------------+------+-----+---------+----------------+
    | account_id        | int(11)      | NO   | PRI | NULL    | auto_increment |
    | email             | varchar(255) | NO   | UNI | NULL    |                |
    | password_enc      | blob         | NO   |     | NULL    |                |
    | salt              | varchar(64)  | NO   |     | NULL    |                |
    | activation_secret | varchar(16)  | NO   |     | NULL    |                |
    | state             | varchar(16)  | NO   | MUL | pending |                |
    | created_at        | int(11)      | NO   |     | 0       |                |
    | updated_at        | int(11)      | NO   |     | 0       |                |
    +-------------------+--------------+------+-----+---------+----------------+
    """

    __tablename__ = 'accounts'
    __table_args__ = {'sqlite_autoincrement': True}

    account_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    password_enc = Column(LargeBinary, nullable=False)
    salt = Column(String(64), nullable=False)
    activation_secret = Column(String(16), nullable=False)
    state = Column(String(16), nullable=False, index=True,
                   server_default=text("'pending'"))
    created_at = Column(Integer, nullable=False, server_default=text("'0'"))
    updated_at = Column(Integer, nullable=False, server_default=text("'0'"))

    def to_domain(self) -> Account:
        """Generate an :class:`.Account` from this row."""
        return Account(
            account_id=self.account_id,
            email=self.email,
            password_hash=self.password_enc,
            salt=self.salt,
            activation_secret=self.activation_secret,
            state=AccountState(self.state),
            created_at=util.from_epoch(self.created_at),
            updated_at=util.from_epoch(self.updated_at)
        )
