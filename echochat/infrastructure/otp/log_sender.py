import logging

from ...application.ports.otp_sender import OTPSender


class LogOTPSender(OTPSender):
    """Writes the code to the application log instead of delivering it.

    Development stand-in only: nothing reaches the phone.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def send(self, phone_number: str, code: str) -> None:
        self._logger.warning(f"OTP for {phone_number}: {code} (not delivered, log-only sender)")
