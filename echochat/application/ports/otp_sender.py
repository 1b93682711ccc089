from typing import Protocol


class OTPSender(Protocol):
    def send(self, phone_number: str, code: str) -> None:
        ...
