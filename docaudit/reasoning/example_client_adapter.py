"""Example reasoning client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseReasoningClient and register the provider in ReasoningClientFactory.
"""

import json
from typing import ClassVar

from docaudit.reasoning.client_base import BaseReasoningClient


class ExampleClientAdapter(BaseReasoningClient):
    """Example adapter that reports no contradictions.

    No network calls. Useful for local development and tests: every document
    goes through the local pattern-based fallback pass.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "contradictions": [],
        "crossDocumentContradictions": [],
        "summary": "No contradictions reported by the example backend",
        "riskLevel": "low",
        "confidenceScore": 0.5,
    }

    def __init__(self) -> None:
        self.model = "example"

    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        _ = system_prompt, user_prompt, max_tokens
        return json.dumps(self.DEFAULT_RESPONSE)
