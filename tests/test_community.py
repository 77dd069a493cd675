from app.services.identity_service import get_identity_service


def test_share_post_appends_one_tagged_post(client, register, db):
    headers, uid, _ = register()
    assert client.get("/community/posts", headers=headers).json()["posts"] == []

    resp = client.post("/community/posts", json={"content": "Resumed at my PPA today!"}, headers=headers)

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Post shared successfully"
    assert len(body["posts"]) == 1
    post = body["posts"][0]
    assert post["content"] == "Resumed at my PPA today!"
    assert post["userId"] == uid
    assert post["userEmail"] == "ada@example.com"
    assert post["userStateCode"] == "LA/23A/1234"
    assert post["userBatch"] == "2023 Batch A"

    feed = client.get("/community/posts", headers=headers).json()["posts"]
    assert [p["id"] for p in feed] == [post["id"]]


def test_feed_is_newest_first(client, auth_headers, db):
    posts = db.collection("posts")
    posts.document("old").set({"content": "old", "userId": "u1", "createdAt": "2024-01-01T08:00:00.000Z"})
    posts.document("new").set({"content": "new", "userId": "u2", "createdAt": "2024-03-01T08:00:00.000Z"})
    posts.document("mid").set({"content": "mid", "userId": "u1", "createdAt": "2024-02-01T08:00:00.000Z"})

    feed = client.get("/community/posts", headers=auth_headers).json()["posts"]

    assert [p["id"] for p in feed] == ["new", "mid", "old"]


def test_author_fields_are_a_snapshot(client, register, db):
    headers, uid, _ = register()
    client.post("/community/posts", json={"content": "First post"}, headers=headers)

    db.collection("users").document(uid).update({"stateCode": "LA/23A/9999", "batch": "2023 Batch B"})
    client.post("/community/posts", json={"content": "Second post"}, headers=headers)

    feed = {p["content"]: p for p in client.get("/community/posts", headers=headers).json()["posts"]}
    assert feed["First post"]["userStateCode"] == "LA/23A/1234"
    assert feed["First post"]["userBatch"] == "2023 Batch A"
    assert feed["Second post"]["userStateCode"] == "LA/23A/9999"
    assert feed["Second post"]["userBatch"] == "2023 Batch B"


def test_blank_post_is_rejected(client, auth_headers, db):
    resp = client.post("/community/posts", json={"content": "   "}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Post content cannot be empty"
    assert list(db.collection("posts").stream()) == []


def test_user_without_profile_cannot_post(client, db):
    identity = get_identity_service()
    identity.create_account("noprofile@example.com", "s3cret-pass")
    token = identity.sign_in("noprofile@example.com", "s3cret-pass")["idToken"]

    resp = client.post(
        "/community/posts",
        json={"content": "Hello"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert resp.status_code == 400
    assert list(db.collection("posts").stream()) == []


def test_feed_requires_sign_in(client):
    assert client.get("/community/posts").status_code == 401
    assert client.post("/community/posts", json={"content": "hi"}).status_code == 401
