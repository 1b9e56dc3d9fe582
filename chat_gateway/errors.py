"""Domain-level exceptions for the chat gateway."""


class BadRequestError(ValueError):
    """Raised for client-side invalid requests at the domain layer."""


class InvalidProviderError(BadRequestError):
    """Raised when dispatch is asked for a provider id outside the known set."""

    def __init__(self, provider_id: object) -> None:
        self.provider_id = provider_id
        super().__init__(f"Invalid provider selected: {provider_id}")


class ProviderCallError(RuntimeError):
    """A provider call failed; wraps transport, rejection and parse failures alike."""

    def __init__(self, provider_id: str, detail: str) -> None:
        self.provider_id = provider_id
        self.detail = detail
        super().__init__(f"Failed to get response from {provider_id}: {detail}")


class ConfigurationError(RuntimeError):
    """Raised when required provider configuration is missing or invalid."""


class ConversationBusyError(RuntimeError):
    """Raised when a conversation already has a call in flight."""
