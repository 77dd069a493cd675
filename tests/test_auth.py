from app.services.identity_service import get_identity_service
from app.services.profile_cache import get_profile_cache


def _signup_payload(**overrides):
    payload = {
        "email": "ada@example.com",
        "password": "s3cret-pass",
        "confirm_password": "s3cret-pass",
        "state_code": "LA/23A/1234",
        "batch": "2023 Batch A",
    }
    payload.update(overrides)
    return payload


def test_signup_creates_account_and_profile(client, db):
    resp = client.post("/auth/signup", json=_signup_payload())

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Account created successfully!"

    doc = db.collection("users").document(body["uid"]).get()
    assert doc.exists
    data = doc.to_dict()
    assert data["email"] == "ada@example.com"
    assert data["stateCode"] == "LA/23A/1234"
    assert data["batch"] == "2023 Batch A"
    assert data["createdAt"].endswith("Z")


def test_signup_with_mismatched_passwords_writes_nothing(client, db):
    resp = client.post("/auth/signup", json=_signup_payload(confirm_password="something-else"))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Passwords do not match"
    assert not get_identity_service().provider.has_account("ada@example.com")
    assert list(db.collection("users").stream()) == []


def test_signup_rejects_duplicate_email(client, db):
    assert client.post("/auth/signup", json=_signup_payload()).status_code == 201

    resp = client.post("/auth/signup", json=_signup_payload(state_code="OY/23A/0001"))

    assert resp.status_code == 400
    assert "already in use" in resp.json()["detail"]
    assert len(list(db.collection("users").stream())) == 1


def test_signup_rejects_short_password(client, db):
    resp = client.post("/auth/signup", json=_signup_payload(password="abc", confirm_password="abc"))

    assert resp.status_code == 400
    assert list(db.collection("users").stream()) == []


def test_signin_with_wrong_password_is_unauthorized(client):
    client.post("/auth/signup", json=_signup_payload())

    resp = client.post("/auth/signin", json={"email": "ada@example.com", "password": "wrong-pass"})

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid email or password"


def test_me_requires_a_bearer_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"}).status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Basic abc"}).status_code == 401


def test_me_returns_identity_and_profile(client, register):
    headers, uid, _ = register()

    resp = client.get("/auth/me", headers=headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["uid"] == uid
    assert body["email"] == "ada@example.com"
    assert body["profile"]["stateCode"] == "LA/23A/1234"


def test_signout_revokes_token_and_drops_cached_profile(client, register):
    headers, uid, _ = register()
    client.get("/dashboard", headers=headers)
    cache = get_profile_cache()
    assert cache.get(uid) is not None

    resp = client.post("/auth/signout", headers=headers)

    assert resp.status_code == 200
    assert resp.json()["message"] == "Signed out"
    assert cache.get(uid) is None
    assert not cache.is_tracking(uid)
    assert client.get("/auth/me", headers=headers).status_code == 401


def test_auth_state_listeners_see_signin_and_signout(client):
    events = []
    identity = get_identity_service()
    unsubscribe = identity.on_auth_state_changed(lambda uid, session: events.append((uid, session is not None)))

    client.post("/auth/signup", json=_signup_payload())
    token = client.post("/auth/signin", json={"email": "ada@example.com", "password": "s3cret-pass"}).json()["token"]
    client.post("/auth/signout", headers={"Authorization": f"Bearer {token}"})
    unsubscribe()
    client.post("/auth/signin", json={"email": "ada@example.com", "password": "s3cret-pass"})

    assert [signed_in for _, signed_in in events] == [True, False]
    assert events[0][0] == events[1][0]
