"""
End-to-end test of the upload -> process -> chat flow over HTTP.

Runs the real services against the in-memory database, the hash
embedding fallback and a scripted chat model.

System role: Verification of the full request flow
"""

import json

import httpx
import pytest
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage

from docchat.api.deps import ServiceCache, get_service_cache
from docchat.api.main import app
from docchat.boundary.db import get_async_db
from docchat.configs import Settings, UploadSettings
from docchat.core.embedding_gateway import EmbeddingGateway

ANSWER = "Plants convert light into chemical energy [1]."


def parse_frames(body: str) -> list[str]:
    return [frame[len("data: "):] for frame in body.split("\n\n") if frame]


@pytest.fixture
def cache(session_factory, storage) -> ServiceCache:
    settings = Settings(
        upload=UploadSettings(
            secret="flow-secret",
            temp_dir=storage.temp_dir,
            files_dir=storage.files_dir,
            max_bytes=1024 * 1024,
        )
    )
    return ServiceCache(
        settings=settings,
        session_factory=session_factory,
        chat_model=GenericFakeChatModel(messages=iter([AIMessage(content=ANSWER)])),
        embedding_gateway=EmbeddingGateway(None, dim=8),
    )


@pytest.fixture
async def client(cache, session_factory):
    async def override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_db
    app.dependency_overrides[get_service_cache] = lambda: cache
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as http_client:
        yield http_client
    app.dependency_overrides.clear()


async def upload(client, cache, pdf: bytes, session_id=None) -> dict:
    payload = {"filename": "biology notes.pdf", "size_bytes": len(pdf)}
    if session_id is not None:
        payload["session_id"] = session_id
    init = await client.post("/api/v1/uploads/init", json=payload)
    assert init.status_code == 200
    ticket = init.json()

    half = len(pdf) // 2
    for part in (pdf[:half], pdf[half:]):
        response = await client.post(
            "/api/v1/uploads/chunk",
            content=part,
            headers={"Authorization": f"Bearer {ticket['token']}"},
        )
        assert response.status_code == 200

    complete = await client.post("/api/v1/uploads/complete", json={"token": ticket["token"]})
    assert complete.status_code == 200
    assert complete.json()["status"] == "processing"
    assert complete.json()["size_bytes"] == len(pdf)

    await cache.queue.drain()
    return ticket


async def test_upload_then_chat_should_stream_cited_answer(client, cache, sample_pdf) -> None:
    ticket = await upload(client, cache, sample_pdf)
    session_id, document_id = ticket["session_id"], ticket["document_id"]

    status = await client.get(f"/api/v1/sessions/{session_id}/documents/{document_id}")
    assert status.status_code == 200
    assert status.json()["status"] == "ready"
    assert status.json()["metadata"]["page_count"] == 2

    response = await client.post(
        "/api/v1/chat/stream",
        json={"session_id": session_id, "question": "What do plants do?"},
    )

    assert response.status_code == 200
    frames = parse_frames(response.text)
    assert json.loads(frames[0]) == {"type": "start"}
    assert frames[-1] == "[DONE]"
    citations = json.loads(frames[-2])
    assert citations["type"] == "citations"
    assert citations["citations"][0]["rank"] == 1
    assert "".join(frames[1:-2]) == ANSWER

    detail = await client.get(f"/api/v1/sessions/{session_id}")
    assert detail.status_code == 200
    body = detail.json()
    assert body["active_document"]["id"] == document_id
    assert [m["role"] for m in body["messages"]] == ["user", "assistant"]
    assert body["messages"][1]["content"] == ANSWER


async def test_new_upload_should_clear_history_and_replace_document(
    client, cache, sample_pdf, pdf_factory
) -> None:
    first = await upload(client, cache, sample_pdf)
    session_id = first["session_id"]
    await client.post(
        "/api/v1/chat/stream",
        json={"session_id": session_id, "question": "What do plants do?"},
    )

    second = await upload(client, cache, pdf_factory([["Mitochondria"]]), session_id=session_id)

    detail = (await client.get(f"/api/v1/sessions/{session_id}")).json()
    assert detail["messages"] == []
    assert detail["active_document"]["id"] == second["document_id"]
    gone = await client.get(f"/api/v1/sessions/{session_id}/documents/{first['document_id']}")
    assert gone.status_code == 404


async def test_chat_before_processing_should_return_400(client, cache, sample_pdf) -> None:
    init = await client.post("/api/v1/uploads/init", json={"size_bytes": len(sample_pdf)})
    session_id = init.json()["session_id"]

    response = await client.post(
        "/api/v1/chat/stream",
        json={"session_id": session_id, "question": "Anything?"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Active document is not ready"


async def test_complete_without_bytes_should_return_400(client) -> None:
    init = await client.post("/api/v1/uploads/init", json={"size_bytes": 10})

    response = await client.post("/api/v1/uploads/complete", json={"token": init.json()["token"]})

    assert response.status_code == 400
    assert response.json()["detail"] == "Upload not found"


async def test_reset_should_empty_session(client, cache, sample_pdf) -> None:
    ticket = await upload(client, cache, sample_pdf)
    session_id = ticket["session_id"]

    response = await client.post(f"/api/v1/sessions/{session_id}/reset")

    assert response.status_code == 200
    assert response.json()["cleared_documents"] == 1
    detail = (await client.get(f"/api/v1/sessions/{session_id}")).json()
    assert detail["active_document"] is None
    assert not list(cache.storage.files_dir.glob(f"doc-{ticket['document_id']}-*"))
