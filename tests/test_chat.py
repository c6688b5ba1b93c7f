"""
Tests for the advisory chat: endpoint, prompt building, keyword answers and
the hosted model client.
"""
from datetime import datetime

import httpx
import pytest

from asset_inventory.application.dto.chat_dto import ChatAssetDTO, ChatRequestDTO
from asset_inventory.application.use_cases.chat_use_cases import (
    ChatUseCases,
    KeywordResponder,
    build_prompt,
    recent_assets,
)
from asset_inventory.infrastructure.llm.client import GeminiClient, LLMError
from asset_inventory.main import app
from asset_inventory.presentation.api.v1.dependencies import get_chat_use_cases

from conftest import asset_json

SNAPSHOT = [
    asset_json("MacBook Pro", asset_id="ASSET-00123", status="In Use", value=2499.99,
               assignedTo="Jane Doe", purchaseDate="2024-01-15"),
    asset_json("Herman Miller Chair", asset_id="ASSET-00124", category="Furniture",
               status="In Storage", value=899.99, purchaseDate="2023-11-20"),
    asset_json("Projector", asset_id="ASSET-00131", status="In Repair", value=699.99,
               purchaseDate="2023-10-08"),
]


def snapshot_assets():
    return [ChatAssetDTO.model_validate(item) for item in SNAPSHOT]


def gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def chat_client(client):
    app.dependency_overrides[get_chat_use_cases] = lambda: ChatUseCases(None)
    return client


class TestChatEndpoint:
    def test_answers_from_snapshot(self, chat_client):
        resp = chat_client.post("/chat", json={"message": "How many assets in total?", "assets": SNAPSHOT})
        assert resp.status_code == 200
        text = resp.json()["response"]
        assert "Total assets" in text
        assert "3" in text

    def test_blank_message_rejected(self, chat_client):
        resp = chat_client.post("/chat", json={"message": "  ", "assets": SNAPSHOT})
        assert resp.status_code == 400
        assert resp.json()["error"] == "InvalidArgument"

    def test_assets_must_be_a_list(self, chat_client):
        resp = chat_client.post("/chat", json={"message": "hi", "assets": "all of them"})
        assert resp.status_code == 400

    def test_null_name_in_snapshot_is_tolerated(self, chat_client):
        snapshot = [*SNAPSHOT, {**SNAPSHOT[0], "name": None, "status": None}]
        resp = chat_client.post("/chat", json={"message": "How many assets in total?", "assets": snapshot})
        assert resp.status_code == 200
        assert "4" in resp.json()["response"]

    def test_document_store_ids_accepted(self, chat_client):
        snapshot = [{**SNAPSHOT[0], "_id": "abc123"}]
        del snapshot[0]["id"]
        resp = chat_client.post("/chat", json={"message": "tell me about abc123", "assets": snapshot})
        assert resp.status_code == 200
        assert "MacBook Pro" in resp.json()["response"]


class TestKeywordResponder:
    def setup_method(self):
        self.responder = KeywordResponder()
        self.assets = snapshot_assets()

    def test_named_asset(self):
        text = self.responder.respond("Where is the projector?", self.assets)
        assert "Projector" in text
        assert "ASSET-00131" in text

    def test_status(self):
        text = self.responder.respond("Which assets are in repair?", self.assets)
        assert "In Repair" in text
        assert "Projector" in text
        assert "MacBook" not in text

    def test_category(self):
        text = self.responder.respond("list furniture", self.assets)
        assert "Herman Miller Chair" in text

    def test_value(self):
        text = self.responder.respond("What is everything worth?", self.assets)
        assert "$4,099.97" in text

    def test_help_when_nothing_matches(self):
        text = self.responder.respond("hello", self.assets)
        assert "How I can help" in text

    def test_empty_inventory(self):
        assert "empty" in self.responder.respond("how many?", [])

    def test_lenient_snapshot_values(self):
        asset = ChatAssetDTO.model_validate({"name": "Thing", "value": "n/a", "purchaseDate": None})
        assert asset.value == 0.0
        assert asset.purchase_date is None

    def test_null_text_fields_become_blank(self):
        asset = ChatAssetDTO.model_validate({"name": None, "category": None, "status": None})
        assert (asset.name, asset.category, asset.status) == ("", "", "")
        assert "How I can help" in self.responder.respond("hello", [asset])


def test_prompt_contains_live_statistics():
    prompt = build_prompt("Which laptop is newest?", snapshot_assets(), now=datetime(2024, 2, 1, 9, 30))
    assert "2024-02-01 09:30" in prompt
    assert "Total Assets: 3" in prompt
    assert "- In Repair: 1" in prompt
    assert "- Furniture: 1 assets" in prompt
    assert 'ASSET-00124: "Herman Miller Chair"' in prompt
    assert prompt.endswith("User Question: Which laptop is newest?")


def test_recent_assets_newest_first():
    assets = snapshot_assets() + [ChatAssetDTO(name="Undated")]
    assert [a.name for a in recent_assets(assets, limit=4)] == [
        "MacBook Pro",
        "Herman Miller Chair",
        "Projector",
        "Undated",
    ]


@pytest.mark.anyio
async def test_hosted_model_answer():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = request.read()
        return httpx.Response(200, json=gemini_reply("## All good"))

    llm = GeminiClient(api_key="secret", model="test-model", api_url="https://llm.test/v1beta",
                       transport=httpx.MockTransport(handler))
    use_cases = ChatUseCases(llm)
    response = await use_cases.answer(ChatRequestDTO(message="status?", assets=SNAPSHOT))

    assert response.response == "## All good"
    assert seen["url"].startswith("https://llm.test/v1beta/models/test-model:generateContent")
    assert "key=secret" in seen["url"]
    assert b"User Question: status?" in seen["body"]


@pytest.mark.anyio
async def test_hosted_model_failure_falls_back():
    llm = GeminiClient(api_key="secret", transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    use_cases = ChatUseCases(llm)
    response = await use_cases.answer(ChatRequestDTO(message="how many assets?", assets=SNAPSHOT))
    assert "Inventory overview" in response.response


@pytest.mark.anyio
async def test_client_without_key_is_disabled():
    llm = GeminiClient(api_key="")
    assert llm.enabled is False
    with pytest.raises(LLMError):
        await llm.generate("hi")


@pytest.mark.anyio
async def test_empty_candidates_is_an_error():
    llm = GeminiClient(api_key="secret", transport=httpx.MockTransport(
        lambda request: httpx.Response(200, json={"candidates": []})))
    with pytest.raises(LLMError):
        await llm.generate("hi")
