class CheckoutError(Exception):
    """Base error rendered to the caller as {"error": message} with status_code."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CheckoutError):
    status_code = 400
    default_message = "Invalid request"


class GatewayError(CheckoutError):
    """The PIX gateway failed or rejected the charge. Carries the gateway's message."""

    status_code = 500
    default_message = "Payment gateway error"


class StoreError(CheckoutError):
    status_code = 500
    default_message = "Order store unavailable"
