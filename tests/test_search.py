"""Tests for message search."""


def search(client, headers, query):
    response = client.get("/api/v1/search", headers=headers, params={"query": query})
    assert response.status_code == 200, response.text
    return [m["message"] for m in response.json()["messages"]]


def test_case_insensitive_substring(client, auth_headers, channel_id):
    for body in ("Hello World", "say hello", "goodbye"):
        client.post(
            f"/api/v1/channels/{channel_id}/messages", headers=auth_headers, json={"message": body}
        )
    assert search(client, auth_headers, "HELLO") == ["say hello", "Hello World"]


def test_wildcards_match_literally(client, auth_headers, channel_id):
    for body in ("100% done", "1000 done", "snake_case", "snakeXcase"):
        client.post(
            f"/api/v1/channels/{channel_id}/messages", headers=auth_headers, json={"message": body}
        )
    assert search(client, auth_headers, "0%") == ["100% done"]
    assert search(client, auth_headers, "e_c") == ["snake_case"]


def test_query_length(client, auth_headers):
    for query in ("", "x" * 1001):
        response = client.get("/api/v1/search", headers=auth_headers, params={"query": query})
        assert response.status_code == 400


def test_no_memberships(client, auth_headers):
    assert search(client, auth_headers, "anything") == []


def test_results_drop_after_leaving(client, auth_headers, other_headers, channel_id):
    client.post(f"/api/v1/channels/{channel_id}/join", headers=other_headers)
    client.post(
        f"/api/v1/channels/{channel_id}/messages", headers=auth_headers, json={"message": "ping"}
    )
    assert search(client, other_headers, "ping") == ["ping"]

    client.post(f"/api/v1/channels/{channel_id}/leave", headers=other_headers)
    assert search(client, other_headers, "ping") == []


def test_end_to_end_visibility(client, register_user):
    """Search only returns messages from conversations the caller belongs to."""
    a = register_user("Alice", "Adams")
    b = register_user("Bob", "Brown")
    d = register_user("Dana", "Dunn")

    channel = client.post("/api/v1/channels", headers=a, json={"name": "C"}).json()["id"]
    client.post(f"/api/v1/channels/{channel}/join", headers=b)
    hi = client.post(
        f"/api/v1/channels/{channel}/messages", headers=a, json={"message": "Hi B"}
    ).json()["message_id"]

    response = client.get("/api/v1/search", headers=b, params={"query": "hi"})
    assert hi in [m["message_id"] for m in response.json()["messages"]]

    dm = client.post("/api/v1/dms", headers=a, json={"user_ids": [b.user_id]}).json()["id"]
    client.post(f"/api/v1/dms/{dm}/messages", headers=b, json={"message": "secret"})
    assert search(client, a, "secret") == ["secret"]

    assert search(client, d, "Hi") == []
