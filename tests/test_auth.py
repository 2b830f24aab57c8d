from datetime import datetime, timedelta, timezone

from esl_classroom.core.security import create_access_token


def _register(client, email="new@school.com", role="student", password="secret123"):
    return client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": "New User", "role": role},
    )


class TestRegister:

    def test_register_returns_token_and_user(self, client):
        resp = _register(client)
        assert resp.status_code == 201
        body = resp.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert body["user"]["email"] == "new@school.com"
        assert body["user"]["role"] == "student"
        assert "password_hash" not in body["user"]

    def test_duplicate_email_rejected(self, client):
        assert _register(client).status_code == 201
        resp = _register(client)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Email already registered"

    def test_unknown_role_rejected(self, client):
        resp = _register(client, role="admin")
        assert resp.status_code == 422


class TestLogin:

    def test_login_with_registered_credentials(self, client):
        _register(client, email="login@school.com")
        resp = client.post(
            "/api/auth/login",
            json={"email": "login@school.com", "password": "secret123"},
        )
        assert resp.status_code == 200
        token = resp.json()["access_token"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "login@school.com"

    def test_wrong_password(self, client):
        _register(client, email="login@school.com")
        resp = client.post(
            "/api/auth/login",
            json={"email": "login@school.com", "password": "wrong-password"},
        )
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Incorrect email or password"

    def test_oauth2_form_login(self, client):
        _register(client, email="form@school.com", role="teacher")
        resp = client.post(
            "/api/auth/token",
            data={"username": "form@school.com", "password": "secret123"},
        )
        assert resp.status_code == 200
        assert resp.json()["user"]["role"] == "teacher"


class TestTokens:

    def test_missing_token(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_garbage_token(self, client):
        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Could not validate credentials"

    def test_expired_token(self, client, student):
        token = create_access_token({"sub": student.email}, expires_delta=timedelta(minutes=-5))
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_token_for_deleted_user(self, client):
        token = create_access_token({"sub": "ghost@school.com"})
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_request_touches_last_active(self, client, student, student_headers):
        resp = client.get("/api/users/me", headers=student_headers)
        assert resp.status_code == 200
        assert resp.json()["last_active_at"] is not None

    def test_last_active_written_at_most_once_a_minute(self, client, student, student_headers, db_session):
        recent = datetime.now(timezone.utc) - timedelta(seconds=5)
        student.last_active_at = recent
        db_session.commit()
        client.get("/api/users/me", headers=student_headers)
        db_session.refresh(student)
        assert student.last_active_at.replace(tzinfo=None) == recent.replace(tzinfo=None)

        stale = datetime.now(timezone.utc) - timedelta(hours=2)
        student.last_active_at = stale
        db_session.commit()
        client.get("/api/users/me", headers=student_headers)
        db_session.refresh(student)
        assert student.last_active_at.replace(tzinfo=None) > stale.replace(tzinfo=None)


class TestUsers:

    def test_update_profile(self, client, student_headers):
        resp = client.put(
            "/api/users/me",
            json={"name": "Jin P.", "level": "elementary"},
            headers=student_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Jin P."
        assert resp.json()["level"] == "elementary"

    def test_null_name_ignored_null_level_cleared(self, client, student_headers):
        resp = client.put("/api/users/me", json={"name": None, "level": None}, headers=student_headers)
        assert resp.status_code == 200, resp.text
        assert resp.json()["name"] == "Jin Park"
        assert resp.json()["level"] is None

    def test_change_password_then_login(self, client):
        token = _register(client, email="pw@school.com").json()["access_token"]
        resp = client.put(
            "/api/users/me",
            json={"password": "brand-new-pass"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 200

        old = client.post("/api/auth/login", json={"email": "pw@school.com", "password": "secret123"})
        new = client.post(
            "/api/auth/login", json={"email": "pw@school.com", "password": "brand-new-pass"}
        )
        assert old.status_code == 401
        assert new.status_code == 200
