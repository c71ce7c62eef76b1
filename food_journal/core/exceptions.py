"""Domain exceptions raised by the service layer."""


class FoodJournalError(Exception):
    """Base class for all food journal errors."""


class NotFoundError(FoodJournalError):
    """Raised when a requested record does not exist."""


class NoReviewsToExportError(NotFoundError):
    """Raised when an export is requested for a user with zero reviews."""


class PersistenceError(FoodJournalError):
    """Raised when a database read or write fails."""


class PlacesNotConfiguredError(FoodJournalError):
    """Raised when the places provider credential is missing."""


class PlacesProviderError(FoodJournalError):
    """Raised when the places provider call fails."""


class OCRProviderError(FoodJournalError):
    """Raised when menu text extraction fails."""


class ValidationError(FoodJournalError):
    """Raised for input rejected before reaching the database."""


class QuickReviewError(ValidationError):
    """Base class for quick-review workflow violations."""


class EmptySelectionError(QuickReviewError):
    """Raised when advancing to rating with nothing selected."""

    def __init__(self, message: str = "Select at least one dish"):
        super().__init__(message)


class IncompleteDraftError(QuickReviewError):
    """Raised when saving while a draft has no would-order-again answer."""

    def __init__(self, message: str = "Choose YES again or Skip for every dish"):
        super().__init__(message)
