"""
Integration tests for the /interview endpoints.
"""
import base64

from app.api.routes import interview as interview_routes
from tests.fakes import evaluation_json


def _start(client, headers, mode="behavioral", role="Backend Engineer"):
    response = client.post(
        "/interview/start",
        json={"targetRole": role, "mode": mode, "options": {"voiceEnabled": True}},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def _answer(client, headers, session_id, answer="I split the work into milestones."):
    return client.post("/interview/next", json={"sessionId": session_id, "answer": answer}, headers=headers)


def test_start_requires_auth(client):
    response = client.post("/interview/start", json={"targetRole": "Engineer", "mode": "hr"})
    assert response.status_code == 401


def test_start_returns_camel_case_payload(client, auth_headers, provider):
    provider.queue("question", "Tell me about a hard deadline you met.")

    data = _start(client, auth_headers)

    assert data["currentQuestion"] == "Tell me about a hard deadline you met."
    assert data["questionNumber"] == 1
    assert data["totalQuestions"] == 5
    assert data["sessionId"]


def test_start_rejects_unknown_mode(client, auth_headers):
    response = client.post(
        "/interview/start",
        json={"targetRole": "Engineer", "mode": "panel"},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_start_rejects_blank_role(client, auth_headers):
    response = client.post(
        "/interview/start",
        json={"targetRole": "   ", "mode": "hr"},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_continue_response_shape(client, auth_headers, provider):
    provider.queue("evaluation", evaluation_json(88, "Specific and measurable."))
    provider.queue("question", "First?", "How did you measure success?")
    session_id = _start(client, auth_headers)["sessionId"]

    response = _answer(client, auth_headers, session_id)

    assert response.status_code == 200
    data = response.json()
    assert data["complete"] is False
    assert data["currentScore"] == 88
    assert data["feedback"] == "Specific and measurable."
    assert data["nextQuestion"] == "How did you measure success?"
    assert data["questionNumber"] == 2
    assert data["totalQuestions"] == 5
    assert data["evaluation"]["strengths"] == ["Clear structure"]
    assert "session" not in data


def test_full_behavioral_interview(client, auth_headers, provider):
    provider.queue("evaluation", *[evaluation_json(s) for s in (70, 80, 90, 60, 75)])
    provider.queue("closing", "Well done overall.")
    session_id = _start(client, auth_headers)["sessionId"]

    for _ in range(4):
        assert _answer(client, auth_headers, session_id).json()["complete"] is False
    response = _answer(client, auth_headers, session_id)

    assert response.status_code == 200
    data = response.json()
    assert data["complete"] is True
    assert data["session"] == {
        "id": session_id,
        "overallScore": 75,
        "totalQuestions": 5,
        "feedback": "Well done overall.",
    }
    assert data["evaluation"]["score"] == 75
    assert "nextQuestion" not in data

    again = _answer(client, auth_headers, session_id)
    assert again.status_code == 409


def test_answer_to_foreign_session_is_not_found(client, auth_headers, other_auth_headers):
    session_id = _start(client, auth_headers)["sessionId"]

    response = _answer(client, other_auth_headers, session_id)

    assert response.status_code == 404
    assert response.json()["detail"] == "Session not found"


def test_blank_answer_is_bad_request(client, auth_headers):
    session_id = _start(client, auth_headers)["sessionId"]

    assert _answer(client, auth_headers, session_id, answer="   ").status_code == 400
    assert _answer(client, auth_headers, session_id, answer="").status_code == 422


def test_ai_outage_is_invisible_to_caller(client, auth_headers, provider):
    provider.fail_all = True

    start = _start(client, auth_headers, mode="hr", role="Engineer")
    assert start["currentQuestion"] == "Tell me about yourself and why you're interested in the Engineer role."

    data = _answer(client, auth_headers, start["sessionId"]).json()
    assert data["currentScore"] == 75
    assert data["nextQuestion"] == "Why do you want to work here?"


def test_voice_answer(client, auth_headers, provider, speech):
    provider.queue("question", "First?", "What would you do differently?")
    provider.queue("evaluation", evaluation_json(66, "Needs more detail."))
    session_id = _start(client, auth_headers)["sessionId"]

    response = client.post(
        "/interview/voice",
        params={"sessionId": session_id},
        content=b"\x1a\x45\xdf\xa3fake-webm",
        headers={**auth_headers, "Content-Type": "audio/webm"},
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["complete"] is False
    assert data["transcript"] == speech.transcript
    assert data["tts"]["mime"] == "audio/mpeg"
    assert base64.b64decode(data["tts"]["feedbackBase64"]) == b"mp3:Score 66 out of 100. Needs more detail."
    assert base64.b64decode(data["tts"]["nextQuestionBase64"]) == b"mp3:What would you do differently?"


def test_voice_final_answer_has_no_next_question_audio(client, auth_headers, provider):
    provider.queue("closing", "Solid finish.")
    session_id = _start(client, auth_headers)["sessionId"]
    for _ in range(4):
        _answer(client, auth_headers, session_id)

    response = client.post(
        "/interview/voice",
        params={"sessionId": session_id},
        content=b"audio-bytes",
        headers={**auth_headers, "Content-Type": "audio/wav"},
    )

    data = response.json()
    assert data["complete"] is True
    assert base64.b64decode(data["tts"]["feedbackBase64"]) == b"mp3:Solid finish."
    assert "nextQuestionBase64" not in data["tts"]


def test_voice_rejects_non_audio(client, auth_headers, speech):
    session_id = _start(client, auth_headers)["sessionId"]

    response = client.post(
        "/interview/voice",
        params={"sessionId": session_id},
        content=b'{"answer": "hi"}',
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert speech.transcribed == []


def test_voice_rejects_oversized_audio(client, auth_headers, speech, monkeypatch):
    monkeypatch.setattr(interview_routes, "MAX_AUDIO_BYTES", 16)
    session_id = _start(client, auth_headers)["sessionId"]

    response = client.post(
        "/interview/voice",
        params={"sessionId": session_id},
        content=b"x" * 32,
        headers={**auth_headers, "Content-Type": "audio/webm"},
    )

    assert response.status_code == 413
    assert speech.transcribed == []


def test_voice_rejects_oversized_chunked_audio(client, auth_headers, speech, monkeypatch):
    monkeypatch.setattr(interview_routes, "MAX_AUDIO_BYTES", 16)
    session_id = _start(client, auth_headers)["sessionId"]

    def chunks():
        for _ in range(4):
            yield b"x" * 8

    response = client.post(
        "/interview/voice",
        params={"sessionId": session_id},
        content=chunks(),
        headers={**auth_headers, "Content-Type": "audio/webm"},
    )

    assert response.status_code == 413
    assert speech.transcribed == []


def test_voice_synthesis_failure_is_bad_gateway(client, auth_headers, speech):
    session_id = _start(client, auth_headers)["sessionId"]
    speech.fail_synthesis = True

    response = client.post(
        "/interview/voice",
        params={"sessionId": session_id},
        content=b"audio-bytes",
        headers={**auth_headers, "Content-Type": "audio/webm"},
    )

    assert response.status_code == 502
    detail = client.get(f"/interview/sessions/{session_id}", headers=auth_headers).json()
    assert detail["answers"] == []


def test_tts_endpoint(client, auth_headers):
    response = client.post("/interview/tts", json={"text": "Welcome to your interview."}, headers=auth_headers)

    assert response.status_code == 200
    assert base64.b64decode(response.json()["audioBase64"]) == b"mp3:Welcome to your interview."


def test_session_detail(client, auth_headers, other_auth_headers, provider):
    provider.queue("question", "Q1?", "Q2?")
    session_id = _start(client, auth_headers)["sessionId"]
    _answer(client, auth_headers, session_id, answer="My answer")

    response = client.get(f"/interview/sessions/{session_id}", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["state"] == "active"
    assert data["mode"] == "behavioral"
    assert data["questionNumber"] == 2
    assert data["totalQuestions"] == 5
    assert data["settings"]["voiceEnabled"] is True
    assert [q["question"] for q in data["questions"]] == ["Q1?", "Q2?"]
    assert data["answers"][0]["answer"] == "My answer"
    assert data["answers"][0]["questionIndex"] == 0
    assert data["answers"][0]["viaVoice"] is False

    assert client.get(f"/interview/sessions/{session_id}", headers=other_auth_headers).status_code == 404


def test_list_completed_sessions(client, auth_headers):
    finished = _start(client, auth_headers)["sessionId"]
    for _ in range(5):
        _answer(client, auth_headers, finished)
    _start(client, auth_headers, mode="hr")

    response = client.get("/interview/sessions", headers=auth_headers)

    assert response.status_code == 200
    sessions = response.json()["sessions"]
    assert len(sessions) == 1
    assert sessions[0]["id"] == finished
    assert sessions[0]["overallScore"] == 70
    assert sessions[0]["questionCount"] == 5
    assert sessions[0]["duration"].endswith(" min")
