"""Tests for :mod:`login_auth.accounts`."""

from unittest import TestCase

from .. import accounts
from ..domain import AccountState
from ..exceptions import AlreadyActive, InvalidToken, ExpiredToken, \
    InactiveAccount, AuthenticationFailed, NoSuchAccount
from ..passwords import ALPHABET
from .util import FakeClock, temporary_store


class TestBeginRegistration(TestCase):
    """Tests for :func:`.accounts.begin_registration`."""

    def setUp(self):
        self.clock = FakeClock()

    def test_new_account(self):
        """A new account is pending, with a fresh salt and secret."""
        with temporary_store() as store:
            account = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                  clock=self.clock)
            self.assertEqual(account.state, AccountState.PENDING)
            self.assertIsNotNone(account.account_id)
            self.assertEqual(account.created_at, self.clock())
            self.assertEqual(account.updated_at, self.clock())
            self.assertGreaterEqual(len(account.salt), 30)
            self.assertEqual(len(account.activation_secret), 8)
            for value in [account.salt, account.activation_secret]:
                self.assertTrue(all(c in ALPHABET for c in value))
            self.assertNotEqual(account.password_hash, b'secret1')

    def test_register_twice_while_pending(self):
        """A second registration replaces the pending account."""
        with temporary_store() as store:
            first = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                clock=self.clock)
            second = accounts.begin_registration(store, 'a@x.com', 'secret2',
                                                 clock=self.clock)
            self.assertNotEqual(first.activation_secret,
                                second.activation_secret)
            self.assertNotEqual(first.salt, second.salt)
            with self.assertRaises(NoSuchAccount):
                store.find_by_id(first.account_id)
            self.assertEqual(store.find_by_email('a@x.com'), second)

    def test_register_when_active(self):
        """An active account cannot be registered again."""
        with temporary_store() as store:
            account = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                  clock=self.clock)
            accounts.activate(store, account, account.activation_secret,
                              clock=self.clock)
            with self.assertRaises(AlreadyActive):
                accounts.begin_registration(store, 'a@x.com', 'secret2',
                                            clock=self.clock)
            self.assertTrue(store.find_by_id(account.account_id).is_active)


class TestActivate(TestCase):
    """Tests for :func:`.accounts.activate`."""

    def setUp(self):
        self.clock = FakeClock()

    def test_correct_secret(self):
        """The correct secret activates the account."""
        with temporary_store() as store:
            account = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                  clock=self.clock)
            active = accounts.activate(store, account,
                                       account.activation_secret,
                                       clock=self.clock)
            self.assertEqual(active.state, AccountState.ACTIVE)
            self.assertTrue(store.find_by_email('a@x.com').is_active)

    def test_wrong_secret(self):
        """The wrong secret does not activate the account."""
        with temporary_store() as store:
            account = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                  clock=self.clock)
            with self.assertRaises(InvalidToken):
                accounts.activate(store, account, 'wrong123',
                                  clock=self.clock)
            self.assertFalse(store.find_by_email('a@x.com').is_active)

    def test_only_latest_secret_works(self):
        """Re-registration invalidates the earlier secret."""
        with temporary_store() as store:
            first = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                clock=self.clock)
            second = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                 clock=self.clock)
            with self.assertRaises(InvalidToken):
                accounts.activate(store, second, first.activation_secret,
                                  clock=self.clock)
            accounts.activate(store, second, second.activation_secret,
                              clock=self.clock)

    def test_within_activation_window(self):
        """The secret still works after 29 minutes."""
        with temporary_store() as store:
            account = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                  clock=self.clock)
            self.clock.advance(minutes=29)
            active = accounts.activate(store, account,
                                       account.activation_secret,
                                       clock=self.clock)
            self.assertTrue(active.is_active)
            self.assertEqual(active.updated_at, self.clock())

    def test_at_end_of_activation_window(self):
        """The secret still works at exactly 30 minutes."""
        with temporary_store() as store:
            account = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                  clock=self.clock)
            self.clock.advance(minutes=30)
            active = accounts.activate(store, account,
                                       account.activation_secret,
                                       clock=self.clock)
            self.assertTrue(active.is_active)

    def test_after_activation_window(self):
        """The secret has expired after 31 minutes."""
        with temporary_store() as store:
            account = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                  clock=self.clock)
            self.clock.advance(minutes=31)
            with self.assertRaises(ExpiredToken):
                accounts.activate(store, account, account.activation_secret,
                                  clock=self.clock)
            self.assertFalse(store.find_by_email('a@x.com').is_active)

    def test_already_active(self):
        """An account can be activated only once."""
        with temporary_store() as store:
            account = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                  clock=self.clock)
            active = accounts.activate(store, account,
                                       account.activation_secret,
                                       clock=self.clock)
            with self.assertRaises(AlreadyActive):
                accounts.activate(store, active, account.activation_secret,
                                  clock=self.clock)


class TestAuthenticate(TestCase):
    """Tests for :func:`.accounts.authenticate`."""

    def setUp(self):
        self.clock = FakeClock()

    def test_pending_account(self):
        """A pending account cannot log in, whatever the password."""
        with temporary_store() as store:
            account = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                  clock=self.clock)
            for password in ['secret1', 'wrongpass']:
                with self.assertRaises(InactiveAccount):
                    accounts.authenticate(account, password)

    def test_active_account(self):
        """An active account logs in with the correct password only."""
        with temporary_store() as store:
            account = accounts.begin_registration(store, 'a@x.com', 'secret1',
                                                  clock=self.clock)
            active = accounts.activate(store, account,
                                       account.activation_secret,
                                       clock=self.clock)
            self.assertIsNone(accounts.authenticate(active, 'secret1'))
            with self.assertRaises(AuthenticationFailed):
                accounts.authenticate(active, 'wrongpass')
