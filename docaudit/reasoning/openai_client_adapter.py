import httpx
import openai

from docaudit.reasoning.client_base import BaseReasoningClient
from docaudit.reasoning.exceptions import (
    ReasoningError,
    ReasoningNetworkError,
    ReasoningTimeoutError,
)


class OpenAIClientAdapter(BaseReasoningClient):
    """Reasoning client built on the OpenAI-compatible chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        temperature: float = 0.0,
        base_url: str | None = None,
    ) -> None:
        self.model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                temperature=self._temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise ReasoningTimeoutError(f"AI provider timed out: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise ReasoningNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ReasoningNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ReasoningError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise ReasoningError("AI returned empty response")
        return content
