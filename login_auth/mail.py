"""Delivery of activation secrets to account holders."""

from abc import ABC, abstractmethod
from email.message import EmailMessage
import logging
import smtplib

from .exceptions import NotificationFailed

logger = logging.getLogger(__name__)

ACTIVATION_SUBJECT = 'Complete your registration'
ACTIVATION_BODY = """Thank you for registering.

Your activation code is: {secret}

The code is valid for 30 minutes. If you did not register, please ignore this
message.
"""


class Notifier(ABC):
    """Sends messages to account holders."""

    @abstractmethod
    def send_activation_secret(self, email: str, secret: str) -> None:
        """
        Send an activation secret to ``email``.

        Raises
        ------
        :class:`.NotificationFailed`

        """


class SMTPNotifier(Notifier):
    """Sends messages through an SMTP service."""

    def __init__(self, host: str = 'localhost', port: int = 1025,
                 sender: str = 'noreply@localhost') -> None:
        self._host = host
        self._port = port
        self._sender = sender

    def _new_connection(self) -> smtplib.SMTP:
        return smtplib.SMTP(host=self._host, port=self._port)

    def send_activation_secret(self, email: str, secret: str) -> None:
        message = EmailMessage()
        message['From'] = self._sender
        message['To'] = email
        message['Subject'] = ACTIVATION_SUBJECT
        message.set_content(ACTIVATION_BODY.format(secret=secret))
        try:
            with self._new_connection() as conn:
                conn.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error('Could not send activation message: %s', e)
            raise NotificationFailed(f'Could not send to {email}') from e
        logger.debug('Sent activation message via %s:%s', self._host,
                     self._port)
