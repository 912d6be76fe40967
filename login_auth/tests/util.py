"""Testing helpers."""

from typing import Generator, Tuple
from contextlib import contextmanager
from datetime import datetime, timedelta
from functools import lru_cache
import os
import shutil
import tempfile

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from pytz import UTC

from ..store import SQLAccountStore
from ..tokens import KeyPair


class FakeClock(object):
    """A clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, tzinfo=UTC)):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


def generate_pem() -> Tuple[bytes, bytes]:
    """Generate a new RSA keypair as PEM blocks (private, public)."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return private_pem, public_pem


@lru_cache(maxsize=None)
def shared_pem() -> Tuple[bytes, bytes]:
    """A keypair shared by the test suite; generating keys is slow."""
    return generate_pem()


def shared_keys() -> KeyPair:
    return KeyPair.from_pem(*shared_pem())


@contextmanager
def temporary_store() -> Generator[SQLAccountStore, None, None]:
    """Provide a store on a throwaway sqlite database."""
    db_path = tempfile.mkdtemp()
    store = SQLAccountStore.from_uri(f'sqlite:///{db_path}/test.db')
    store.create_all()
    try:
        yield store
    finally:
        store.drop_all()
        store.engine.dispose()
        shutil.rmtree(db_path)


@contextmanager
def temporary_key_files() -> Generator[Tuple[str, str], None, None]:
    """Write the shared test keypair to PEM files."""
    key_path = tempfile.mkdtemp()
    private_path = os.path.join(key_path, 'private.pem')
    public_path = os.path.join(key_path, 'public.pem')
    private_pem, public_pem = shared_pem()
    with open(private_path, 'wb') as f:
        f.write(private_pem)
    with open(public_path, 'wb') as f:
        f.write(public_pem)
    try:
        yield private_path, public_path
    finally:
        shutil.rmtree(key_path)
