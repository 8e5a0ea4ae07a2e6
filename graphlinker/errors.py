"""Exception hierarchy for the gateway."""


class GatewayError(Exception):
    """Base class for gateway errors."""


class ConfigurationError(GatewayError):
    """Startup configuration is missing or invalid. The process must not start."""


class AuthorizationError(GatewayError):
    """A request names a sender or recipient that is not allow-listed."""


class SenderNotAllowedError(AuthorizationError):
    def __init__(self, sender: str):
        self.sender = sender
        super().__init__(f"Sender '{sender}' is not allowed.")


class RecipientNotAllowedError(AuthorizationError):
    def __init__(self, recipient: str, sender: str):
        self.recipient = recipient
        self.sender = sender
        super().__init__(f"Recipient '{recipient}' is not allowed for sender '{sender}'.")


class AttachmentDecodeError(GatewayError, ValueError):
    """An attachment's base64 payload could not be decoded."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Attachment '{name}' has an invalid base64 payload.")
