"""EchoChat: phone-number/OTP authenticated chat API and its client flow."""

__version__ = "1.0.0"
