from pathlib import Path

import app
from stores import RecordStore, get_store


def test_health_lists_collections(client, store):
    store.save("users", [])
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "collections": ["users"]}


def test_docs_markdown_and_structured(client):
    md = client.get("/api/docs")
    assert md.status_code == 200
    assert md.headers["content-type"].startswith("text/markdown")

    resp = client.get("/api/docs/structured")
    assert resp.status_code == 200
    structured = resp.json()
    assert structured["title"] == "Yasha Tech Learning API"
    by_title = {s["title"]: s for s in structured["sections"]}
    assert "Auth" in by_title and "Questions" in by_title
    assert by_title["Auth"]["endpoints"] == ["POST /api/auth/signup", "POST /api/auth/login"]
    assert "GET /api/videos" in by_title["Videos"]["endpoints"]
    assert by_title["Questions"]["content"].startswith("- `POST /api/questions`")


def test_parse_reference_without_sections():
    from routes.docs import parse_reference

    ref = parse_reference("# Empty\n\nnothing here\n")
    assert ref.title == "Empty"
    assert ref.sections == []


def test_pages_served_from_static_dir(client, settings):
    settings.static_dir.mkdir(parents=True)
    (settings.static_dir / "index.html").write_text("<h1>home</h1>", encoding="utf-8")
    (settings.static_dir / "teacher.html").write_text("<h1>teacher</h1>", encoding="utf-8")

    home = client.get("/")
    assert home.status_code == 200
    assert "home" in home.text
    assert "teacher" in client.get("/teacher.html").text

    missing = client.get("/admin.html")
    assert missing.status_code == 404
    assert missing.json()["message"] == "admin.html not found"


def test_corrupt_collection_under_raise_policy_is_a_500(client, settings):
    strict = RecordStore(settings.data_dir, corrupt_policy="raise")
    Path(strict.path_for("courseVideos")).write_text("not valid json", encoding="utf-8")
    app.app.dependency_overrides[get_store] = lambda: strict

    resp = client.get("/api/videos")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Stored data is corrupt", "collection": "courseVideos"}


def test_corrupt_collection_falls_back_by_default(client, store):
    store.path_for("courseVideos").write_text("not valid json", encoding="utf-8")
    assert client.get("/api/videos").json() == []


def test_malformed_json_body_is_a_400(client):
    resp = client.post("/api/videos", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid request body"
