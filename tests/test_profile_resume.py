"""
Tests for profile and resume storage and the candidate context they produce.
"""
import fitz  # pymupdf

from app.api.routes import resume as resume_routes
from app.db.models.activity_log import ActivityLog
from app.services.profile_service import (
    add_resume,
    get_primary_resume,
    load_candidate_context,
    upsert_profile,
)


def _pdf_bytes(text: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def test_candidate_context_without_profile(db, user):
    context = load_candidate_context(db, user.id)
    assert context.has_profile is False
    assert context.resume_excerpt is None


def test_candidate_context_from_profile_and_resume(db, user):
    upsert_profile(db, user.id, {"headline": "Platform engineer", "skills": [" Go ", "", "Kubernetes"], "experience_years": 7})
    add_resume(db, user.id, "x" * 800)

    context = load_candidate_context(db, user.id)

    assert context.has_profile is True
    assert context.headline == "Platform engineer"
    assert context.skills == ["Go", "Kubernetes"]
    assert context.experience_years == 7
    assert context.resume_excerpt == "x" * 500


def test_upsert_ignores_unknown_fields(db, user):
    profile = upsert_profile(db, user.id, {"headline": "PM", "user_id": 999})
    assert profile.user_id == user.id
    assert profile.headline == "PM"


def test_new_primary_resume_replaces_old(db, user):
    first = add_resume(db, user.id, "First resume")
    assert first.is_primary is True

    second = add_resume(db, user.id, "Second resume")
    assert second.is_primary is False
    assert get_primary_resume(db, user.id).id == first.id

    third = add_resume(db, user.id, "Third resume", make_primary=True)
    db.refresh(first)
    assert first.is_primary is False
    assert get_primary_resume(db, user.id).id == third.id


def test_profile_routes(client, auth_headers, db, user):
    empty = client.get("/profile", headers=auth_headers)
    assert empty.status_code == 200
    assert empty.json()["skills"] == []

    response = client.put(
        "/profile",
        json={"headline": "Backend engineer", "skills": ["Python", "SQL"], "experience_years": 4},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["skills"] == ["Python", "SQL"]
    assert client.get("/profile", headers=auth_headers).json()["headline"] == "Backend engineer"
    entry = db.query(ActivityLog).filter(ActivityLog.user_id == user.id).one()
    assert entry.type == "profile_updated"


def test_profile_feeds_first_question(client, auth_headers, provider):
    client.put("/profile", json={"headline": "ML engineer", "skills": ["PyTorch"]}, headers=auth_headers)
    client.post("/resume", json={"text": "Trained ranking models at Example Corp."}, headers=auth_headers)

    client.post("/interview/start", json={"targetRole": "ML Engineer", "mode": "technical"}, headers=auth_headers)

    prompt = provider.prompts("question")[0]
    assert "PyTorch" in prompt
    assert "Trained ranking models at Example Corp." in prompt


def test_resume_text_route(client, auth_headers):
    response = client.post("/resume", json={"text": "Senior engineer, 8 years."}, headers=auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["is_primary"] is True
    assert data["original_file"] is None
    assert data["preview"] == "Senior engineer, 8 years."


def test_resume_pdf_upload(client, auth_headers):
    response = client.post(
        "/resume/upload",
        files={"file": ("cv.pdf", _pdf_bytes("Jane Doe Python Engineer"), "application/pdf")},
        headers=auth_headers,
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["original_file"] == "cv.pdf"
    assert "Jane Doe Python Engineer" in data["preview"]

    listed = client.get("/resume", headers=auth_headers).json()["resumes"]
    assert [r["id"] for r in listed] == [data["id"]]


def test_resume_upload_rejects_non_pdf(client, auth_headers):
    response = client.post(
        "/resume/upload",
        files={"file": ("cv.txt", b"plain text", "text/plain")},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_resume_upload_rejects_corrupt_pdf(client, auth_headers):
    response = client.post(
        "/resume/upload",
        files={"file": ("cv.pdf", b"%PDF-not really", "application/pdf")},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_resume_upload_rejects_oversized_file(client, auth_headers, monkeypatch):
    monkeypatch.setattr(resume_routes, "MAX_UPLOAD_BYTES", 16)

    response = client.post(
        "/resume/upload",
        files={"file": ("cv.pdf", b"%PDF-" + b"x" * 64, "application/pdf")},
        headers=auth_headers,
    )

    assert response.status_code == 413
    assert client.get("/resume", headers=auth_headers).json()["resumes"] == []
