"""Tests for the :mod:`login_auth.generate_token` commands."""

from unittest import TestCase
import os
import shutil
import tempfile

from click.testing import CliRunner

from ..domain import TokenClass
from ..generate_token import generate_keys, generate_token
from ..tokens import CredentialEngine, KeyPair


class TestGenerateToken(TestCase):
    """Generate a keypair, then a credential signed with it."""

    def setUp(self):
        self.path = tempfile.mkdtemp()
        self.private_key = os.path.join(self.path, 'keys', 'private.pem')
        self.public_key = os.path.join(self.path, 'keys', 'public.pem')
        self.runner = CliRunner()

    def tearDown(self):
        shutil.rmtree(self.path)

    def _generate_keys(self):
        result = self.runner.invoke(generate_keys, [
            '--private_key', self.private_key,
            '--public_key', self.public_key
        ])
        self.assertEqual(result.exit_code, 0, result.output)

    def test_generate_keys(self):
        """A loadable keypair is written."""
        self._generate_keys()
        KeyPair.from_files(self.private_key, self.public_key)

    def test_generate_token(self):
        """The credential verifies with the same keys."""
        self._generate_keys()
        engine = CredentialEngine(KeyPair.from_files(self.private_key,
                                                     self.public_key))
        for token_class in TokenClass:
            result = self.runner.invoke(generate_token, [
                '--account_id', '4',
                '--token_class', token_class.value,
                '--private_key', self.private_key,
                '--public_key', self.public_key
            ])
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertEqual(engine.verify(result.output.strip(), token_class),
                             4)

    def test_missing_keys(self):
        """No keys, no credential."""
        result = self.runner.invoke(generate_token, [
            '--account_id', '4',
            '--private_key', self.private_key,
            '--public_key', self.public_key
        ])
        self.assertNotEqual(result.exit_code, 0)
