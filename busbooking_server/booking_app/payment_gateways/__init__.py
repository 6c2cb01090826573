from .payment_gateway import PaymentGateway, PaymentGatewayError
from .mock_payment_gateway import MockPaymentGateway
from .stripe_payment_gateway import StripePaymentGateway

__all__ = ['PaymentGateway', 'PaymentGatewayError', 'MockPaymentGateway', 'StripePaymentGateway']
