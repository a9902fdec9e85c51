"""Book store exceptions"""


class BookStoreError(Exception):
    """Raised when the backend store rejects an operation or returns an unusable response."""

    def __init__(self, operation: str, message: str = ""):
        self.operation = operation
        self.message = message or f"Book store operation failed: {operation}"
        super().__init__(self.message)
