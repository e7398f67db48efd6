from __future__ import annotations


class QuoteValidationError(ValueError):
    """Rejected quotation input. The message is shown to the user as-is."""


class MalformedItemsError(QuoteValidationError):
    def __init__(self, message: str = "Invalid item data in request.") -> None:
        super().__init__(message)


class MissingItemsError(QuoteValidationError):
    def __init__(self, message: str = "Please add at least one item.") -> None:
        super().__init__(message)


class MissingItemNameError(QuoteValidationError):
    def __init__(self, message: str = "Please provide item name.") -> None:
        super().__init__(message)


class MissingCustomerError(QuoteValidationError):
    def __init__(self, message: str = "Customer name is required.") -> None:
        super().__init__(message)


class QuoteNotFoundError(LookupError):
    def __init__(self, quote_id: object) -> None:
        super().__init__(f"Quote not found: {quote_id}")
        self.quote_id = quote_id
