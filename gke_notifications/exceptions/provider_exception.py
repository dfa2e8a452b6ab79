class ProviderException(Exception):
    """Raised when a provider fails to deliver a notification."""

    def __init__(self, message, status_code=None, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message
        self.status_code = status_code
