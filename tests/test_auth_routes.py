# tests/test_auth_routes.py

BASE = "/api/auth"

NEW_STUDENT = {
    "firstName": "Lin",
    "lastName": "Learner",
    "email": "Lin@EduManage.com",
    "password": "longenough",
}


def test_register_student(client, seeded):
    res = client.post(f"{BASE}/register", json=NEW_STUDENT)

    body = res.get_json()
    assert res.status_code == 201
    assert body["message"] == "User registered successfully"
    assert body["token"]
    assert body["user"]["email"] == "lin@edumanage.com"
    assert body["user"]["role"] == "student"
    assert "password" not in body["user"]


def test_register_instructor_awaits_approval(client, seeded):
    res = client.post(f"{BASE}/register", json={**NEW_STUDENT, "role": "instructor"})

    assert res.status_code == 201
    assert res.get_json()["user"]["isApproved"] is False


def test_register_honours_password_min_length(client, seeded):
    res = client.post(f"{BASE}/register", json={**NEW_STUDENT, "password": "short7x"})

    assert res.status_code == 400
    assert res.get_json()["errors"] == ["Password must be at least 8 characters"]


def test_register_closed_for_role(client, seeded, admin_headers):
    client.put("/api/configurations/student_registration_open", json={"value": False}, headers=admin_headers)

    res = client.post(f"{BASE}/register", json=NEW_STUDENT)

    assert res.status_code == 403
    assert res.get_json()["message"] == "Registration is currently closed for students"


def test_register_duplicate_email(client, seeded):
    client.post(f"{BASE}/register", json=NEW_STUDENT)

    res = client.post(f"{BASE}/register", json={**NEW_STUDENT, "email": "lin@edumanage.com"})

    assert res.status_code == 409


def test_register_cannot_self_assign_admin(client, seeded):
    res = client.post(f"{BASE}/register", json={**NEW_STUDENT, "role": "admin"})

    assert res.status_code == 400
    assert "Invalid role" in res.get_json()["errors"]


def test_register_missing_fields(client):
    res = client.post(f"{BASE}/register", json={"email": "not-an-email", "password": "123456"})

    assert res.status_code == 400
    assert res.get_json()["errors"] == [
        "First name is required",
        "Last name is required",
        "Please enter a valid email",
    ]


def test_login(client, admin_user):
    res = client.post(f"{BASE}/login", json={"email": "ADA@edumanage.com", "password": "secret123"})

    assert res.status_code == 200
    assert res.get_json()["user"]["role"] == "admin"


def test_login_bad_password(client, admin_user):
    res = client.post(f"{BASE}/login", json={"email": "ada@edumanage.com", "password": "nope"})

    assert res.status_code == 401
    assert res.get_json()["message"] == "Invalid credentials"


def test_me(client, admin_headers):
    res = client.get(f"{BASE}/me", headers=admin_headers)

    assert res.status_code == 200
    assert res.get_json()["user"]["email"] == "ada@edumanage.com"


def test_me_requires_token(client):
    assert client.get(f"{BASE}/me").status_code == 401


def test_token_of_deactivated_user(client, admin_user, admin_headers, mongo_db):
    mongo_db.users.update_one({"_id": admin_user["_id"]}, {"$set": {"isActive": False}})

    res = client.get(f"{BASE}/me", headers=admin_headers)

    assert res.status_code == 401
    assert res.get_json()["message"] == "Account is deactivated"
