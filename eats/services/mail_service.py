# eats/services/mail_service.py
import logging

import httpx

from eats.core.config import settings

logger = logging.getLogger(__name__)


class MailService:
    """Outbound e-mail through the Mailgun HTTP API."""

    @staticmethod
    async def send_email(to: str, subject: str, template: str, variables: dict) -> bool:
        """
        Send a templated e-mail.

        Failures are logged and reported through the return value only;
        callers never wait on delivery.

        Args:
            to: Recipient address
            subject: E-mail subject
            template: Mailgun template name
            variables: Template variables

        Returns:
            True if Mailgun accepted the message, False otherwise
        """
        if not settings.MAILGUN_API_KEY or not settings.MAILGUN_DOMAIN:
            logger.warning(f"Mailgun is not configured, skipping e-mail to {to}")
            return False

        data = {
            "from": settings.MAILGUN_FROM_EMAIL,
            "to": to,
            "subject": subject,
            "template": template,
        }
        for key, value in variables.items():
            data[f"v:{key}"] = value

        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.post(
                    f"https://api.mailgun.net/v3/{settings.MAILGUN_DOMAIN}/messages",
                    auth=("api", settings.MAILGUN_API_KEY),
                    data=data
                )

                if response.status_code != 200:
                    logger.error(f"Mailgun rejected e-mail to {to}: {response.text}")
                    return False

                logger.info(f"E-mail '{subject}' sent to {to}")
                return True

        except httpx.TimeoutException:
            logger.error(f"Timeout sending e-mail to {to}")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Error sending e-mail to {to}: {e}")
            return False

    @staticmethod
    async def send_verification_email(email: str, code: str) -> bool:
        """
        Send the account verification link.

        Args:
            email: Recipient address
            code: Verification code

        Returns:
            True if the e-mail was accepted
        """
        return await MailService.send_email(
            to=email,
            subject="Verify Your Email",
            template="verify-email",
            variables={
                "code": code,
                "username": email,
                "link": f"{settings.EMAIL_VERIFICATION_URL}?code={code}",
            }
        )
