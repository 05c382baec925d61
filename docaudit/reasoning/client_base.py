from abc import ABC, abstractmethod


class BaseReasoningClient(ABC):
    """Contract for provider-specific reasoning backends."""

    model: str = ""

    @abstractmethod
    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        """Return the provider response as plain text."""
