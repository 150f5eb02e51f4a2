"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SettlementError(ApplicationError):
    """Raised by a Settler when no settlement reference could be produced. No transition follows."""


class PaymentFailedError(SettlementError):
    """The payment provider could not settle the transfer."""


class UserRejectedError(SettlementError):
    """The payer declined the transfer."""


class ProviderUnavailableError(SettlementError):
    """The payment provider could not be reached."""


class SettlementRequiredError(ApplicationError):
    """Raised when policy requires a settlement reference and none was supplied or obtained."""
