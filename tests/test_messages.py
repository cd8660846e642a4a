"""Tests for sending, paging and changing messages."""

import pytest

from huddle.services.membership import MembershipService
from huddle.services.messages import MessageService


def seed_messages(db, channel_id, sender_id, count):
    """Append ``count`` messages directly through the service."""
    channel = MembershipService(db).get_channel(channel_id)
    service = MessageService(db)
    for i in range(count):
        service.post(channel, sender_id, f"message {i}")
    db.commit()


def send(client, headers, channel_id, body):
    response = client.post(
        f"/api/v1/channels/{channel_id}/messages", headers=headers, json={"message": body}
    )
    assert response.status_code == 201, response.text
    return response.json()["message_id"]


def page(client, headers, channel_id, start=0):
    return client.get(f"/api/v1/channels/{channel_id}/messages?start={start}", headers=headers)


@pytest.fixture
def joined(client, other_headers, channel_id):
    """The second user joins the shared channel."""
    client.post(f"/api/v1/channels/{channel_id}/join", headers=other_headers)
    return other_headers


class TestPaging:
    """Tests for message pages."""

    def test_empty_channel(self, client, auth_headers, channel_id):
        response = page(client, auth_headers, channel_id)
        assert response.status_code == 200
        assert response.json() == {"messages": [], "start": 0, "end": -1}

    def test_start_beyond_count(self, client, auth_headers, channel_id):
        assert page(client, auth_headers, channel_id, start=1).status_code == 400

    def test_negative_start(self, client, auth_headers, channel_id):
        assert page(client, auth_headers, channel_id, start=-1).status_code == 400

    def test_pages_newest_first(self, client, db, auth_headers, channel_id):
        seed_messages(db, channel_id, auth_headers.user_id, 120)

        first = page(client, auth_headers, channel_id).json()
        assert len(first["messages"]) == 50
        assert first["end"] == 50
        assert first["messages"][0]["message"] == "message 119"

        second = page(client, auth_headers, channel_id, start=50).json()
        assert second["end"] == 100
        assert second["messages"][0]["message"] == "message 69"

        last = page(client, auth_headers, channel_id, start=100).json()
        assert len(last["messages"]) == 20
        assert last["end"] == -1
        assert last["messages"][-1]["message"] == "message 0"

        # start == count is an empty final page
        empty = page(client, auth_headers, channel_id, start=120).json()
        assert empty["messages"] == []
        assert empty["end"] == -1

    def test_exactly_one_page(self, client, db, auth_headers, channel_id):
        seed_messages(db, channel_id, auth_headers.user_id, 50)
        data = page(client, auth_headers, channel_id).json()
        assert len(data["messages"]) == 50
        assert data["end"] == -1

    def test_non_member(self, client, other_headers, channel_id):
        assert page(client, other_headers, channel_id).status_code == 403

    def test_unknown_channel(self, client, auth_headers):
        assert page(client, auth_headers, 99999).status_code == 400


class TestSend:
    """Tests for sending messages."""

    def test_send(self, client, auth_headers, channel_id):
        message_id = send(client, auth_headers, channel_id, "hello")
        message = page(client, auth_headers, channel_id).json()["messages"][0]
        assert message["message_id"] == message_id
        assert message["user_id"] == auth_headers.user_id
        assert message["reacts"] == []
        assert message["is_pinned"] is False

    def test_ids_increase(self, client, auth_headers, channel_id):
        first = send(client, auth_headers, channel_id, "one")
        second = send(client, auth_headers, channel_id, "two")
        assert second > first

    def test_length_limits(self, client, auth_headers, channel_id):
        for body in ("", "x" * 1001):
            response = client.post(
                f"/api/v1/channels/{channel_id}/messages",
                headers=auth_headers,
                json={"message": body},
            )
            assert response.status_code == 400
        send(client, auth_headers, channel_id, "x" * 1000)

    def test_non_member(self, client, other_headers, channel_id):
        response = client.post(
            f"/api/v1/channels/{channel_id}/messages",
            headers=other_headers,
            json={"message": "hi"},
        )
        assert response.status_code == 403


class TestEditAndRemove:
    """Tests for editing and removing messages."""

    def test_sender_edits(self, client, auth_headers, joined, channel_id):
        message_id = send(client, joined, channel_id, "typo")
        response = client.put(
            f"/api/v1/messages/{message_id}", headers=joined, json={"message": "fixed"}
        )
        assert response.status_code == 200
        assert page(client, joined, channel_id).json()["messages"][0]["message"] == "fixed"

    def test_owner_edits_others(self, client, auth_headers, joined, channel_id):
        message_id = send(client, joined, channel_id, "hello")
        response = client.put(
            f"/api/v1/messages/{message_id}", headers=auth_headers, json={"message": "moderated"}
        )
        assert response.status_code == 200

    def test_member_cannot_edit_others(self, client, auth_headers, joined, channel_id):
        message_id = send(client, auth_headers, channel_id, "mine")
        response = client.put(
            f"/api/v1/messages/{message_id}", headers=joined, json={"message": "yours"}
        )
        assert response.status_code == 403

    def test_empty_edit_deletes(self, client, auth_headers, channel_id):
        message_id = send(client, auth_headers, channel_id, "bye")
        response = client.put(
            f"/api/v1/messages/{message_id}", headers=auth_headers, json={"message": ""}
        )
        assert response.status_code == 200
        assert page(client, auth_headers, channel_id).json()["messages"] == []

    def test_edit_too_long(self, client, auth_headers, channel_id):
        message_id = send(client, auth_headers, channel_id, "short")
        response = client.put(
            f"/api/v1/messages/{message_id}", headers=auth_headers, json={"message": "x" * 1001}
        )
        assert response.status_code == 400

    def test_remove(self, client, auth_headers, channel_id):
        message_id = send(client, auth_headers, channel_id, "bye")
        url = f"/api/v1/messages/{message_id}"
        assert client.delete(url, headers=auth_headers).status_code == 200
        assert client.delete(url, headers=auth_headers).status_code == 400

    def test_sender_who_left_cannot_remove(self, client, auth_headers, joined, channel_id):
        message_id = send(client, joined, channel_id, "mine")
        client.post(f"/api/v1/channels/{channel_id}/leave", headers=joined)
        assert client.delete(f"/api/v1/messages/{message_id}", headers=joined).status_code == 403


class TestReacts:
    """Tests for reacting to messages."""

    def test_react_and_unreact(self, client, auth_headers, joined, channel_id):
        message_id = send(client, auth_headers, channel_id, "react to me")

        response = client.post(
            f"/api/v1/messages/{message_id}/react", headers=joined, json={"react_id": 1}
        )
        assert response.status_code == 200

        seen_by_sender = page(client, auth_headers, channel_id).json()["messages"][0]
        assert seen_by_sender["reacts"] == [
            {"react_id": 1, "user_ids": [joined.user_id], "is_this_user_reacted": False}
        ]
        seen_by_reactor = page(client, joined, channel_id).json()["messages"][0]
        assert seen_by_reactor["reacts"][0]["is_this_user_reacted"] is True

        response = client.post(
            f"/api/v1/messages/{message_id}/unreact", headers=joined, json={"react_id": 1}
        )
        assert response.status_code == 200
        assert page(client, auth_headers, channel_id).json()["messages"][0]["reacts"] == []

    def test_invalid_react_id(self, client, auth_headers, channel_id):
        message_id = send(client, auth_headers, channel_id, "hi")
        response = client.post(
            f"/api/v1/messages/{message_id}/react", headers=auth_headers, json={"react_id": 2}
        )
        assert response.status_code == 400

    def test_duplicate_react(self, client, auth_headers, channel_id):
        message_id = send(client, auth_headers, channel_id, "hi")
        url = f"/api/v1/messages/{message_id}/react"
        assert client.post(url, headers=auth_headers, json={"react_id": 1}).status_code == 200
        assert client.post(url, headers=auth_headers, json={"react_id": 1}).status_code == 400

    def test_unreact_without_react(self, client, auth_headers, channel_id):
        message_id = send(client, auth_headers, channel_id, "hi")
        response = client.post(
            f"/api/v1/messages/{message_id}/unreact", headers=auth_headers, json={"react_id": 1}
        )
        assert response.status_code == 400

    def test_react_outside_conversation(self, client, auth_headers, other_headers, channel_id):
        message_id = send(client, auth_headers, channel_id, "hi")
        response = client.post(
            f"/api/v1/messages/{message_id}/react", headers=other_headers, json={"react_id": 1}
        )
        assert response.status_code == 400


class TestPins:
    """Tests for pinning messages."""

    def test_pin_and_unpin(self, client, auth_headers, channel_id):
        message_id = send(client, auth_headers, channel_id, "important")
        pin = f"/api/v1/messages/{message_id}/pin"
        unpin = f"/api/v1/messages/{message_id}/unpin"

        assert client.post(pin, headers=auth_headers).status_code == 200
        assert page(client, auth_headers, channel_id).json()["messages"][0]["is_pinned"] is True
        assert client.post(pin, headers=auth_headers).status_code == 400

        assert client.post(unpin, headers=auth_headers).status_code == 200
        assert client.post(unpin, headers=auth_headers).status_code == 400

    def test_member_cannot_pin(self, client, auth_headers, joined, channel_id):
        message_id = send(client, joined, channel_id, "mine")
        response = client.post(f"/api/v1/messages/{message_id}/pin", headers=joined)
        assert response.status_code == 403


class TestShare:
    """Tests for sharing messages."""

    def test_share_to_channel_with_comment(self, client, auth_headers, channel_id):
        original = send(client, auth_headers, channel_id, "line one\nline two")
        response = client.post(
            "/api/v1/messages/share",
            headers=auth_headers,
            json={"og_message_id": original, "message": "look", "channel_id": channel_id},
        )
        assert response.status_code == 201
        shared = page(client, auth_headers, channel_id).json()["messages"][0]
        assert shared["message_id"] == response.json()["message_id"]
        assert shared["message"] == "look\n> line one\n> line two"

    def test_share_to_dm_without_comment(self, client, auth_headers, other_headers, channel_id):
        original = send(client, auth_headers, channel_id, "hello")
        dm = client.post(
            "/api/v1/dms", headers=auth_headers, json={"user_ids": [other_headers.user_id]}
        ).json()["id"]

        response = client.post(
            "/api/v1/messages/share",
            headers=auth_headers,
            json={"og_message_id": original, "dm_id": dm},
        )
        assert response.status_code == 201
        messages = client.get(f"/api/v1/dms/{dm}/messages", headers=other_headers).json()
        assert messages["messages"][0]["message"] == "> hello"

    def test_share_needs_exactly_one_target(self, client, auth_headers, channel_id):
        original = send(client, auth_headers, channel_id, "hello")
        for targets in ({}, {"channel_id": channel_id, "dm_id": channel_id}):
            response = client.post(
                "/api/v1/messages/share",
                headers=auth_headers,
                json={"og_message_id": original, **targets},
            )
            assert response.status_code == 400

    def test_share_into_foreign_channel(self, client, auth_headers, other_headers, channel_id):
        original = send(client, auth_headers, channel_id, "hello")
        foreign = client.post(
            "/api/v1/channels", headers=other_headers, json={"name": "theirs"}
        ).json()["id"]
        response = client.post(
            "/api/v1/messages/share",
            headers=auth_headers,
            json={"og_message_id": original, "channel_id": foreign},
        )
        assert response.status_code == 403

    def test_share_invisible_message(self, client, auth_headers, other_headers, channel_id):
        original = send(client, auth_headers, channel_id, "secret")
        own = client.post(
            "/api/v1/channels", headers=other_headers, json={"name": "theirs"}
        ).json()["id"]
        response = client.post(
            "/api/v1/messages/share",
            headers=other_headers,
            json={"og_message_id": original, "channel_id": own},
        )
        assert response.status_code == 400
