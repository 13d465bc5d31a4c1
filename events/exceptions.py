class InvalidRecurrenceError(ValueError):
    """Raised when a recurrence pattern or rule string can't be encoded or expanded"""

    default_message = "Invalid recurrence."

    def __init__(self, message: str | None = None):
        if message is None:
            message = self.default_message
        super().__init__(message)
