"""
Errors raised by the cart and payment layers.

The web layer maps each one to a status code and one of the messages below.
"""

# user-facing messages
ERROR_INVALID_TAG = "Invalid RFID Tag"
ERROR_PAYMENT_VERIFICATION_FAILED = "Payment Verification Failed"
ERROR_INVALID_REQUEST = "Invalid request"


class ScanCartError(Exception):
    """Base class for errors reported back to the client."""


class UnknownTag(ScanCartError):
    def __init__(self, tag: str) -> None:
        super().__init__(f"tag not in catalog: {tag!r}")
        self.tag = tag


class SignatureMismatch(ScanCartError):
    # carries nothing about the expected value
    def __init__(self) -> None:
        super().__init__("payment signature does not match")


class UpstreamOrderFailure(ScanCartError):
    """The payment provider refused or failed to create an order."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
