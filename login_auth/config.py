"""Flask configuration."""

import os

#################### Signing keys ####################
JWT_PRIVATE_KEY_PATH = os.environ.get('JWT_PRIVATE_KEY_PATH',
                                      'keys/private.pem')
"""PEM-encoded RSA private key used to sign credentials."""

JWT_PUBLIC_KEY_PATH = os.environ.get('JWT_PUBLIC_KEY_PATH', 'keys/public.pem')
"""PEM-encoded RSA public key used to verify credentials."""

#################### Database ####################
DATABASE_URI = os.environ.get('DATABASE_URI', 'sqlite:///accounts.db')
"""SQLAlchemy URI of the account database."""

#################### Mail ####################
SMTP_HOST = os.environ.get('SMTP_HOST', 'localhost')
SMTP_PORT = int(os.environ.get('SMTP_PORT', '1025'))
MAIL_SENDER = os.environ.get('MAIL_SENDER', 'noreply@localhost')
"""From address of activation messages."""

#################### Refresh cookie ####################
REFRESH_COOKIE_NAME = os.environ.get('REFRESH_COOKIE_NAME', 'refresh-token')
REFRESH_COOKIE_SECURE = bool(int(os.environ.get('REFRESH_COOKIE_SECURE', '1')))
"""Only send the refresh cookie over HTTPS. Disable for local development."""

#################### Logging ####################
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
LOG_JSON = bool(int(os.environ.get('LOG_JSON', '1')))
"""Emit JSON log records on the root logger."""
