"""Tests for the public HTTP API."""

from uuid import uuid4

from fastapi.testclient import TestClient

from color_profile.api.app import create_app
from tests.conftest import build_face_image, questionnaire_answers

WEBHOOK_HEADERS = {"X-Webhook-Token": "webhook-token"}


def _client(container) -> TestClient:
    return TestClient(create_app(container))


def _paid_session_id(client: TestClient) -> str:
    session_id = client.post("/api/v1/sessions").json()["session"]["id"]
    response = client.post(
        f"/api/v1/sessions/{session_id}/payment",
        json={"outcome": "succeeded", "reference": "pay_123"},
        headers=WEBHOOK_HEADERS,
    )
    assert response.status_code == 200
    return session_id


def test_health(container) -> None:
    response = _client(container).get("/health")
    assert response.json() == {"status": "ok"}


def test_full_flow(container, blob_store) -> None:
    client = _client(container)
    session_id = _paid_session_id(client)
    blob_store.blobs["selfies/face.png"] = build_face_image()

    selfie = client.post(
        f"/api/v1/analysis/{session_id}/selfie",
        json={"image_location": "selfies/face.png"},
    )
    assert selfie.status_code == 200
    assert selfie.json()["success"] is True

    questionnaire = client.post(
        f"/api/v1/analysis/{session_id}/questionnaire",
        json=questionnaire_answers().model_dump(),
    )
    assert questionnaire.json()["status"] == "questionnaire_complete"

    start = client.post(
        f"/api/v1/analysis/{session_id}/start",
        headers={"X-User-Id": str(uuid4())},
    )
    assert start.status_code == 200
    analysis_id = start.json()["analysis_id"]
    assert start.json()["started"] is True

    status = client.get(f"/api/v1/analysis/{session_id}/status").json()
    assert status["status"] == "analysis_complete"
    assert status["analysis_id"] == analysis_id
    assert status["expired"] is False

    result = client.get(f"/api/v1/results/{analysis_id}")
    assert result.status_code == 200
    assert result.json()["result"]["primary_metal"] == "Gold"

    repeat = client.post(f"/api/v1/analysis/{session_id}/start")
    assert repeat.json() == {
        "success": True,
        "analysis_id": analysis_id,
        "started": False,
    }


def test_payment_requires_webhook_token(container) -> None:
    client = _client(container)
    session_id = client.post("/api/v1/sessions").json()["session"]["id"]

    response = client.post(
        f"/api/v1/sessions/{session_id}/payment",
        json={"outcome": "succeeded", "reference": "pay_123"},
        headers={"X-Webhook-Token": "wrong"},
    )

    assert response.status_code == 401


def test_payment_success_without_reference_is_rejected(container) -> None:
    client = _client(container)
    session_id = client.post("/api/v1/sessions").json()["session"]["id"]

    response = client.post(
        f"/api/v1/sessions/{session_id}/payment",
        json={"outcome": "succeeded"},
        headers=WEBHOOK_HEADERS,
    )

    assert response.status_code == 400


def test_rejected_selfie_returns_400(container, blob_store, face_detector) -> None:
    client = _client(container)
    session_id = _paid_session_id(client)
    blob_store.blobs["selfies/face.png"] = build_face_image()
    face_detector.faces = []

    response = client.post(
        f"/api/v1/analysis/{session_id}/selfie",
        json={"image_location": "selfies/face.png"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "NO_FACE_DETECTED"


def test_detector_outage_returns_502(container, blob_store, face_detector) -> None:
    client = _client(container)
    session_id = _paid_session_id(client)
    blob_store.blobs["selfies/face.png"] = build_face_image()
    face_detector.error = RuntimeError("vision down")

    response = client.post(
        f"/api/v1/analysis/{session_id}/selfie",
        json={"image_location": "selfies/face.png"},
    )

    assert response.status_code == 502
    assert response.json()["error"] == "VALIDATION_API_ERROR"


def test_guard_violations_map_to_error_codes(container) -> None:
    client = _client(container)
    session_id = client.post("/api/v1/sessions").json()["session"]["id"]

    wrong_state = client.post(
        f"/api/v1/analysis/{session_id}/questionnaire",
        json=questionnaire_answers().model_dump(),
    )
    missing = client.get(f"/api/v1/analysis/{uuid4()}/status")
    no_result = client.get(f"/api/v1/results/{uuid4()}")

    assert wrong_state.status_code == 409
    assert wrong_state.json()["error"] == "INVALID_SESSION_STATE"
    assert missing.status_code == 404
    assert missing.json()["error"] == "SESSION_NOT_FOUND"
    assert no_result.json()["error"] == "ANALYSIS_NOT_FOUND"


def test_questionnaire_validation(container) -> None:
    client = _client(container)
    session_id = client.post("/api/v1/sessions").json()["session"]["id"]
    answers = questionnaire_answers().model_dump()
    answers["natural_hair_color"] = "brown"

    response = client.post(
        f"/api/v1/analysis/{session_id}/questionnaire", json=answers
    )

    assert response.status_code == 422


def test_pipeline_failure_returns_500(
    container, ready_session, analysis_client
) -> None:
    analysis_client.error = RuntimeError("model unavailable")

    response = _client(container).post(
        f"/api/v1/analysis/{ready_session.id}/start"
    )

    assert response.status_code == 500
    assert response.json()["error"] == "ANALYSIS_START_FAILED"


def test_user_analyses_are_listed(container, ready_session) -> None:
    client = _client(container)
    user_id = str(uuid4())
    client.post(
        f"/api/v1/analysis/{ready_session.id}/start", headers={"X-User-Id": user_id}
    )

    response = client.get(f"/api/v1/users/{user_id}/analyses")

    assert len(response.json()["analyses"]) == 1
    assert response.json()["analyses"][0]["owner_id"] == user_id


def test_hair_color_catalog(container) -> None:
    response = _client(container).get("/api/v1/hair-colors")

    categories = response.json()["categories"]
    assert list(categories) == ["Blondes", "Browns", "Blacks", "Reds/Auburns"]
    assert categories["Blacks"][0]["hex"].startswith("#")
