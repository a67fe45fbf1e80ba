import httpx

from ayu.config import settings
from ayu.services import gemini_service

PREFIX = settings.API_PREFIX


def test_chat_requires_message(client):
    response = client.post(f"{PREFIX}/chat", json={"message": "  "})

    assert response.status_code == 400
    assert response.json()["message"] == "Message is required"


def test_chat_returns_model_reply(client, monkeypatch):
    seen = {}

    async def _fake_reply(message, history=None):
        seen["message"] = message
        seen["history"] = history
        return "Triphala supports digestion."

    monkeypatch.setattr(gemini_service, "generate_reply", _fake_reply)
    response = client.post(f"{PREFIX}/chat", json={
        "message": "What helps digestion?",
        "history": [{"role": "user", "text": "Hi"}, {"role": "model", "text": "Namaste"}],
    })

    assert response.status_code == 200
    assert response.json()["data"] == {"reply": "Triphala supports digestion."}
    assert seen["message"] == "What helps digestion?"
    assert seen["history"][1] == {"role": "model", "text": "Namaste"}


def test_chat_without_api_key_is_unavailable(client, monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)

    response = client.post(f"{PREFIX}/chat", json={"message": "Hello"})

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to get a response from the AI."


def test_build_payload_includes_system_instruction_and_history():
    payload = gemini_service.build_payload("Why ghee?", [{"role": "user", "text": "Hi"}])

    assert "Ayurveda" in payload["systemInstruction"]["parts"][0]["text"]
    assert payload["contents"][0] == {"role": "user", "parts": [{"text": "Hi"}]}
    assert payload["contents"][-1] == {"role": "user", "parts": [{"text": "Why ghee?"}]}
    assert payload["generationConfig"] == {"temperature": 0.9, "topK": 1, "topP": 1}


def test_extract_reply_joins_parts():
    payload = {"candidates": [{"content": {"parts": [{"text": "Vata "}, {"text": "balance."}]}}]}

    assert gemini_service.extract_reply(payload) == "Vata balance."
    assert gemini_service.extract_reply({"candidates": []}) is None


def test_upstream_failure_is_reported_as_unavailable(client, monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "key")

    def _handler(request):
        return httpx.Response(500, json={"error": "boom"})

    real_client = httpx.AsyncClient
    monkeypatch.setattr(
        gemini_service.httpx,
        "AsyncClient",
        lambda **kwargs: real_client(transport=httpx.MockTransport(_handler), **kwargs),
    )

    response = client.post(f"{PREFIX}/chat", json={"message": "Hello"})

    assert response.status_code == 500
