def test_signup_creates_pending_user(client, register, store):
    resp = register("new@x.com")
    assert resp.status_code == 201
    payload = resp.json()
    assert payload["message"] == "Signup successful (pending approval)"
    user = payload["user"]
    assert user["status"] == "pending"
    assert user["courseType"] == "online"
    assert user["courses"] == [] and user["projectLog"] == [] and user["profile"] == {}
    assert user["createdAt"].endswith("Z")

    stored = store.load("users", [])
    assert [u["email"] for u in stored] == ["new@x.com"]


def test_teacher_signup_drops_course_type(client, register):
    resp = register("teach@x.com", role="teacher")
    assert resp.status_code == 201
    assert resp.json()["user"]["courseType"] is None


def test_signup_requires_fields(client):
    resp = client.post("/api/auth/signup", json={"email": "x@x.com"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Missing required fields"}

    resp_empty = client.post("/api/auth/signup")
    assert resp_empty.status_code == 400


def test_signup_rejects_duplicate_email_ignoring_case(client, register, store):
    assert register("b@x.com").status_code == 201
    resp = register("B@X.com")
    assert resp.status_code == 409
    assert resp.json()["message"] == "Email already registered"
    assert len(store.load("users", [])) == 1


def test_login_matches_email_case_insensitively(client, register):
    register("A@X.com", approve=True)

    resp = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret", "role": "student"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Login successful"
    assert data["user"] == {
        "name": "Asha",
        "email": "A@X.com",
        "role": "student",
        "status": "approved",
        "courseType": "online",
    }


def test_login_errors(client, register):
    register("p@x.com")

    missing = client.post("/api/auth/login", json={"email": "p@x.com"})
    assert missing.status_code == 400
    assert missing.json()["message"] == "Missing email/password/role"

    wrong = client.post("/api/auth/login", json={"email": "p@x.com", "password": "nope", "role": "student"})
    assert wrong.status_code == 401

    wrong_role = client.post("/api/auth/login", json={"email": "p@x.com", "password": "secret", "role": "teacher"})
    assert wrong_role.status_code == 401

    pending = client.post("/api/auth/login", json={"email": "p@x.com", "password": "secret", "role": "student"})
    assert pending.status_code == 403
    assert pending.json()["message"] == "Account pending admin approval"

    client.patch("/api/admin/users/p@x.com/status", json={"status": "rejected"})
    rejected = client.post("/api/auth/login", json={"email": "p@x.com", "password": "secret", "role": "student"})
    assert rejected.status_code == 403
    assert rejected.json()["message"] == "Account rejected"


def test_login_defaults_missing_role_to_student(client, store):
    store.save("users", [{"name": "Old", "email": "old@x.com", "password": "pw", "status": "approved"}])
    resp = client.post("/api/auth/login", json={"email": "OLD@x.com", "password": "pw", "role": "student"})
    assert resp.status_code == 200


def test_admin_lists_and_updates_users(client, register):
    register("one@x.com")
    register("two@x.com")

    listing = client.get("/api/admin/users")
    assert listing.status_code == 200
    assert [u["email"] for u in listing.json()] == ["one@x.com", "two@x.com"]

    resp = client.patch("/api/admin/users/TWO@x.com/status", json={"status": "approved"})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Status updated"
    assert resp.json()["user"]["status"] == "approved"

    bad = client.patch("/api/admin/users/two@x.com/status", json={"status": "banned"})
    assert bad.status_code == 400
    assert bad.json()["message"] == "Invalid status"

    missing = client.patch("/api/admin/users/ghost@x.com/status", json={"status": "approved"})
    assert missing.status_code == 404
    assert missing.json()["message"] == "User not found"
