import asyncio

from docaudit.logging.logger import Log
from docaudit.reasoning.client_base import BaseReasoningClient
from docaudit.reasoning.exceptions import ReasoningTimeoutError


class BaseAnalyzer:
    """Shared backend plumbing for the single and cross-document analyzers."""

    def __init__(
        self,
        *,
        client: BaseReasoningClient,
        max_tokens: int = 2000,
        timeout_seconds: float | None = 60,
    ) -> None:
        self._client = client
        self._max_tokens = max_tokens
        self._timeout_seconds = timeout_seconds

    @property
    def model(self) -> str:
        return self._client.model

    async def _call_backend(self, system_prompt: str, user_prompt: str) -> str:
        """Call the reasoning backend, bounded by the configured timeout.

        Raises:
            ReasoningTimeoutError: if the backend does not answer in time.
        """
        Log.debug(f"Analysis prompt:\n{user_prompt}")
        try:
            raw = await asyncio.wait_for(
                self._client.complete(system_prompt, user_prompt, self._max_tokens),
                timeout=self._timeout_seconds,
            )
        except TimeoutError as exc:
            raise ReasoningTimeoutError(
                f"Reasoning backend did not respond within {self._timeout_seconds}s"
            ) from exc
        Log.debug(f"Backend raw response:\n{raw}")
        return raw
