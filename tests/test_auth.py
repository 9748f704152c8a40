from datetime import timedelta

from sqlalchemy.exc import OperationalError

from hopebot.core import security
from hopebot.core.config import settings
from hopebot.core.security import create_session_token, hash_password, verify_password
from hopebot.core.timezone import utcnow
from hopebot.models.session import UserSession
from hopebot.models.user import User


def test_status_when_anonymous(client):
    resp = client.get("/api/auth/status")
    assert resp.status_code == 200
    assert resp.json() == {"authenticated": False}


def test_register_creates_session(client, register):
    resp = register(username="Alice", email="Alice@Example.com")
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "User created successfully"
    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "alice@example.com"
    assert "password" not in body["user"]

    status = client.get("/api/auth/status").json()
    assert status == {"authenticated": True, "userId": body["user"]["id"]}


def test_password_is_hashed(client, register, db):
    register(password="plain-text")
    user = db.query(User).one()
    assert user.password != "plain-text"
    assert verify_password("plain-text", user.password)


def test_duplicate_email_is_case_insensitive(client, register):
    assert register().status_code == 201
    resp = register(username="someone-else", email="ALICE@example.COM")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email already in use"


def test_duplicate_username(client, register):
    register()
    resp = register(username="ALICE", email="other@example.com")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Username already taken"


def test_register_validation_errors(client):
    resp = client.post("/api/auth/register", json={"username": "bob", "email": "not-an-email", "password": "x"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Invalid input data"
    assert body["errors"][0]["loc"][-1] == "email"

    resp = client.post("/api/auth/register", json={"username": "   ", "email": "b@example.com", "password": "x"})
    assert resp.status_code == 400

    resp = client.post("/api/auth/register", json={"email": "b@example.com"})
    assert resp.status_code == 400


def test_login_and_bad_credentials(client, register):
    register(password="right-password")
    client.post("/api/auth/logout")

    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"

    resp = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "right-password"})
    assert resp.status_code == 401

    resp = client.post("/api/auth/login", json={"email": "ALICE@example.com", "password": "right-password"})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Login successful"
    assert resp.json()["user"]["email"] == "alice@example.com"
    assert client.get("/api/users/me").status_code == 200


def test_login_validation(client):
    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": ""})
    assert resp.status_code == 400


def test_logout_destroys_server_session(client, logged_in, db):
    assert db.query(UserSession).count() == 1

    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logout successful"}
    assert db.query(UserSession).count() == 0
    assert client.get("/api/auth/status").json() == {"authenticated": False}


def test_stolen_cookie_is_useless_after_logout(client, logged_in):
    cookie = client.cookies.get(settings.SESSION_COOKIE_NAME)
    client.post("/api/auth/logout")
    client.cookies.clear()
    client.cookies.set(settings.SESSION_COOKIE_NAME, cookie)
    assert client.get("/api/users/me").status_code == 401


def test_users_me(client, logged_in):
    resp = client.get("/api/users/me")
    assert resp.status_code == 200
    assert resp.json() == logged_in


def test_users_me_requires_session(client):
    resp = client.get("/api/users/me")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Not authenticated"}


def test_users_me_when_user_vanished(client, db):
    user = User(username="ghost", email="ghost@example.com", password=hash_password("x"))
    db.add(user)
    db.commit()
    db.add(UserSession(sid="ghost-sid", user_id=user.id, expires_at=utcnow() + timedelta(hours=1)))
    db.commit()
    # Drop the user row but keep the session
    db.query(User).filter(User.id == user.id).delete()
    db.commit()

    client.cookies.clear()
    client.cookies.set(settings.SESSION_COOKIE_NAME, create_session_token("ghost-sid"))
    assert client.get("/api/users/me").status_code == 404


def test_expired_session_rejected(client, logged_in, db):
    record = db.query(UserSession).one()
    record.expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    assert client.get("/api/users/me").status_code == 401
    db.expire_all()
    assert db.query(UserSession).count() == 0


def test_forged_cookie_rejected(client, logged_in):
    client.cookies.clear()
    client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-token")
    assert client.get("/api/auth/status").json() == {"authenticated": False}


def test_session_cookie_attributes(client, register):
    resp = register()
    cookie = resp.headers["set-cookie"].lower()
    assert settings.SESSION_COOKIE_NAME in cookie
    assert "httponly" in cookie
    assert "max-age=86400" in cookie
    assert "secure" not in cookie


def test_session_cookie_secure_in_production(client, register, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "production")
    resp = register()
    assert resp.status_code == 201
    assert "secure" in resp.headers["set-cookie"].lower()


def test_logout_store_failure(client, logged_in, db, monkeypatch):
    def broken(request, db):
        raise OperationalError("SELECT sessions", {}, Exception("database is locked"))

    monkeypatch.setattr(security, "load_session", broken)
    resp = client.post("/api/auth/logout")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to logout"}
    assert db.query(UserSession).count() == 1
