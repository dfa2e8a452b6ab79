"""
Errors raised while decoding or describing a cluster notification.
"""


class PayloadDecodeError(ValueError):
    """A known event type carried a payload that does not match its schema."""

    def __init__(self, type_url: str, reason: str):
        super().__init__(f"Failed to decode payload for {type_url}: {reason}")
        self.type_url = type_url
        self.reason = reason


class MessageError(Exception):
    """A decoded message that cannot be summarised.

    These never abort a request; renderers turn them into placeholder text.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class InvalidPayloadError(MessageError):
    def __init__(self):
        super().__init__("Empty or invalid payload")


class UnknownMessageTypeError(MessageError):
    def __init__(self, type_url: str):
        super().__init__(f"Unknown message type `{type_url}` encountered")
        self.type_url = type_url
