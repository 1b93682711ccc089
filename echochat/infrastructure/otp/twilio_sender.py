from twilio.rest import Client
from twilio.base.exceptions import TwilioRestException
from typing import Optional
import logging

from ...core.config import settings
from ...application.ports.otp_sender import OTPSender

logger = logging.getLogger(__name__)

class TwilioOTPSender(OTPSender):
    def __init__(self, client: Optional[Client] = None, from_number: Optional[str] = None, country_code: Optional[str] = None):
        self.client = client or Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        self.from_number = from_number or settings.TWILIO_PHONE_NUMBER
        self.country_code = country_code or settings.PHONE_COUNTRY_CODE

    def send(self, phone_number: str, code: str) -> None:
        if not self.from_number:
            raise RuntimeError("Twilio sender phone number not configured")
        to = f"{self.country_code}{phone_number}"
        try:
            message = self.client.messages.create(
                to=to,
                from_=self.from_number,
                body=f"Your EchoChat verification code is {code}. It expires in {settings.OTP_EXPIRY_MINUTES} minutes.",
            )
        except TwilioRestException as e:
            logger.error(f"Twilio SMS error for {to}: {e}")
            raise
        logger.info(f"OTP SMS queued for {to}: {message.sid}")
