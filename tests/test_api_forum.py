from fastapi.testclient import TestClient

BODY = "This is a sufficiently long body."


def _create_post(client: TestClient, title="Hello there", content=BODY, categories=""):
    return client.post("/api/posts", data={"title": title, "content": content, "categories": categories})


def _like(client: TestClient, is_like="true", **target):
    return client.post("/api/like", data={**{k: str(v) for k, v in target.items()}, "is_like": is_like})


def _only_post(client: TestClient):
    [post] = client.get("/api/posts").json()
    return post


def test_forum_scenario(client: TestClient, register, login):
    assert register(client, "alice", "a@x.com", "pw123456").status_code == 201
    assert login(client, "a@x.com", "pw123456").status_code == 200
    assert "session_id" in client.cookies

    created = _create_post(client, "Hello there", BODY, "")
    assert created.status_code == 201
    post_id = created.json()["post_id"]
    assert _only_post(client)["categories"] == ["Other"]

    assert _like(client, post_id=post_id).status_code == 200
    post = _only_post(client)
    assert post["likes"] == 1
    assert post["user_liked"] is True and post["user_disliked"] is False

    assert _like(client, post_id=post_id).status_code == 200
    post = _only_post(client)
    assert post["likes"] == 0
    assert post["user_vote"] is None and post["user_liked"] is None


def test_like_then_dislike_flips(client: TestClient, signup):
    signup(client)
    post_id = _create_post(client).json()["post_id"]

    _like(client, "true", post_id=post_id)
    _like(client, "false", post_id=post_id)

    post = _only_post(client)
    assert (post["likes"], post["dislikes"]) == (0, 1)
    assert post["user_vote"] == "dislike"


def test_create_post_requires_session(client: TestClient):
    response = _create_post(client)
    assert response.status_code == 401
    assert response.json() == {"error": "auth_required", "message": "Authentication required"}


def test_create_post_validation(client: TestClient, signup):
    signup(client)

    assert _create_post(client, title="Hey").status_code == 400
    assert _create_post(client, title="x" * 101).status_code == 400
    assert _create_post(client, title="      ").status_code == 400
    assert _create_post(client, content="too short").status_code == 400
    assert _create_post(client, content="y" * 2001).status_code == 400
    assert _create_post(client, content="          \n  ").status_code == 400

    five = _create_post(client, categories="General,Technology,Sports,Movies,Music")
    assert five.status_code == 400
    assert "4 categories" in five.json()["message"]
    assert client.get("/api/posts").json() == []


def test_create_post_with_categories(client: TestClient, signup):
    signup(client)

    response = _create_post(client, categories="Music, Books,Music,,Unknown")

    assert response.status_code == 201
    assert _only_post(client)["categories"] == ["Books", "Music"]


def test_post_listing_shape(client: TestClient, signup):
    signup(client)
    _create_post(client, categories="Travel")

    post = _only_post(client)

    assert post["title"] == "Hello there"
    assert post["content"] == BODY
    assert post["author_name"] == "alice"
    assert {"id", "author_id", "created", "updated", "likes", "dislikes"} <= post.keys()


def test_posts_filters(client: TestClient, other_client: TestClient, signup):
    signup(client, "alice")
    signup(other_client, "bob")
    _create_post(client, "Alice on music", categories="Music")
    bob_post = _create_post(other_client, "Bob on books", categories="Books").json()["post_id"]
    _like(client, post_id=bob_post)

    def titles(c, **params):
        response = c.get("/api/posts", params=params)
        assert response.status_code == 200
        return [p["title"] for p in response.json()]

    assert titles(client) == ["Bob on books", "Alice on music"]
    assert titles(client, filter="category", value="Music") == ["Alice on music"]
    assert titles(client, filter="category", value="Cooking") == []
    assert titles(client, filter="created") == ["Alice on music"]
    assert titles(client, filter="liked") == ["Bob on books"]
    assert titles(other_client, filter="liked") == []
    assert titles(client, filter="whatever") == ["Bob on books", "Alice on music"]


def test_own_content_filters_need_session(client: TestClient, signup, other_client: TestClient):
    signup(other_client)
    _create_post(other_client)

    assert client.get("/api/posts", params={"filter": "created"}).status_code == 401
    assert client.get("/api/posts", params={"filter": "liked"}).status_code == 401

    anonymous = client.get("/api/posts")
    assert anonymous.status_code == 200
    assert anonymous.json()[0]["user_vote"] is None


def test_post_detail_with_comments(client: TestClient, other_client: TestClient, signup):
    signup(client, "alice")
    signup(other_client, "bob")
    post_id = _create_post(client).json()["post_id"]

    first = client.post("/api/comments", data={"post_id": post_id, "content": "First comment"})
    assert first.status_code == 201
    second = other_client.post("/api/comments", data={"post_id": post_id, "content": "Second comment"})
    comment_id = second.json()["comment_id"]
    assert _like(client, "false", comment_id=comment_id).status_code == 200

    response = client.get(f"/api/post/{post_id}")

    assert response.status_code == 200
    body = response.json()
    assert body["post"]["id"] == post_id
    comments = body["comments"]
    assert [c["content"] for c in comments] == ["First comment", "Second comment"]
    assert [c["author_name"] for c in comments] == ["alice", "bob"]
    assert comments[1]["dislikes"] == 1
    assert comments[1]["user_disliked"] is True


def test_post_detail_errors(client: TestClient):
    bad = client.get("/api/post/abc")
    assert bad.status_code == 400
    assert bad.json()["error"] == "validation_error"

    missing = client.get("/api/post/12345")
    assert missing.status_code == 404
    assert missing.json() == {"error": "not_found", "message": "Post not found"}


def test_comment_rules(client: TestClient, signup):
    assert client.post("/api/comments", data={"post_id": "1", "content": "Hi there"}).status_code == 401

    signup(client)
    post_id = _create_post(client).json()["post_id"]

    assert client.post("/api/comments", data={"post_id": post_id, "content": "x"}).status_code == 400
    assert client.post("/api/comments", data={"post_id": post_id, "content": "z" * 501}).status_code == 400
    assert client.post("/api/comments", data={"post_id": post_id, "content": "   "}).status_code == 400
    assert client.post("/api/comments", data={"post_id": "", "content": "Hi there"}).status_code == 400
    assert client.post("/api/comments", data={"post_id": "abc", "content": "Hi there"}).status_code == 400
    assert client.post("/api/comments", data={"post_id": "999", "content": "Hi there"}).status_code == 404


def test_like_rules(client: TestClient, signup):
    assert _like(client, post_id=1).status_code == 401

    signup(client)
    post_id = _create_post(client).json()["post_id"]
    comment_id = client.post("/api/comments", data={"post_id": post_id, "content": "Hi"}).json()["comment_id"]

    assert _like(client).status_code == 400
    assert _like(client, post_id=post_id, comment_id=comment_id).status_code == 400
    assert _like(client, "", post_id=post_id).status_code == 400
    assert _like(client, "maybe", post_id=post_id).status_code == 400
    assert _like(client, post_id="abc").status_code == 400
    assert _like(client, post_id=999).status_code == 404


def test_categories(client: TestClient):
    response = client.get("/api/categories")

    assert response.status_code == 200
    names = [c["name"] for c in response.json()]
    assert names == sorted(names)
    assert "Other" in names
    assert all(isinstance(c["id"], int) for c in response.json())
