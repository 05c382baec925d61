import json

import pytest

from docaudit.reasoning.example_client_adapter import ExampleClientAdapter


class TestExampleClientAdapter:
    @pytest.mark.asyncio
    async def test_returns_empty_findings_json(self) -> None:
        adapter = ExampleClientAdapter()

        payload = json.loads(await adapter.complete("system", "user", 100))

        assert payload["contradictions"] == []
        assert payload["crossDocumentContradictions"] == []

    def test_model_name(self) -> None:
        assert ExampleClientAdapter().model == "example"
