from abc import ABC, abstractmethod


class PaymentGatewayError(Exception):
    """Raised when a payment provider rejects or cannot process a request"""
    pass


class PaymentGateway(ABC):
    service_name = None
    requires_redirect = False

    @abstractmethod
    def initiate_payment(self, booking):
        """Start a payment. Returns a dict the caller hands back to the client."""
        pass

    @abstractmethod
    def confirm_payment(self, booking, reference=None):
        """Settle a payment. Returns the provider's transaction id."""
        pass

    @abstractmethod
    def handle_webhook(self, request):
        """
        Parse a provider callback.

        Returns dict with booking_id, status and transaction_id, or None
        when the event is not about a payment outcome.
        """
        pass
