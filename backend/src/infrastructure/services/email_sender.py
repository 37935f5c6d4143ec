"""
Logging E-mail Sender
Writes outgoing messages to the log instead of delivering them
"""
from application.services.auth.interfaces import IEmailSender
from core.logging_config import logger


class LoggingEmailSender(IEmailSender):
    """E-mail sender for environments without an SMTP relay"""

    async def send(self, to: str, subject: str, body: str) -> None:
        logger.info(f"E-mail to {to}: {subject}")
        logger.debug(f"E-mail body for {to}:\n{body}")
