"""
Integration tests for Chat API endpoints.
Tests routes, status codes and the response envelope.
"""
from devfolio.models import MessagePermission
from devfolio.repositories.user_repo import UserRepository


class TestConversationAPI:
    """Test cases for conversation endpoints."""

    async def test_list_requires_auth(self, unauth_client):
        response = await unauth_client.get("/api/chat/conversations")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["message"]

    async def test_invalid_token_is_rejected(self, unauth_client):
        response = await unauth_client.get(
            "/api/chat/conversations",
            headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    async def test_get_or_create(self, client, test_user_2):
        response = await client.get(f"/api/chat/conversation/{test_user_2.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["participant"]["id"] == test_user_2.id
        assert body["data"]["participant"]["username"] == "bob"
        assert body["data"]["unread_count"] == 0
        assert body["data"]["last_message"] is None

    async def test_get_or_create_with_self(self, client, test_user):
        response = await client.get(f"/api/chat/conversation/{test_user.id}")

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Cannot create conversation with yourself",
        }

    async def test_get_or_create_unknown_user(self, client):
        response = await client.get("/api/chat/conversation/unknown-user")

        assert response.status_code == 404
        assert response.json()["success"] is False

    async def test_get_or_create_denied_by_permission(self, client, make_user):
        closed = await make_user("mallory", message_permission=MessagePermission.NONE)

        response = await client.get(f"/api/chat/conversation/{closed.id}")

        assert response.status_code == 403
        assert response.json()["success"] is False

    async def test_existing_permission_returns_seeded_conversation(
        self, client, db_session, test_user_2, test_conversation
    ):
        await UserRepository(db_session).update(
            test_user_2.id, message_permission=MessagePermission.EXISTING
        )

        response = await client.get(f"/api/chat/conversation/{test_user_2.id}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == test_conversation.id

    async def test_blocked_user_cannot_reach_blocker(
        self, client, db_session, test_user, test_user_2, auth_headers_2, test_conversation
    ):
        await UserRepository(db_session).add_block(test_user.id, test_user_2.id)

        response = await client.get(
            f"/api/chat/conversation/{test_user.id}",
            headers=auth_headers_2
        )

        assert response.status_code == 403
        assert response.json()["message"] == "You are blocked by this user"

    async def test_list_conversations(self, client, test_user_2, test_conversation):
        await client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={"content": "hey"}
        )

        response = await client.get("/api/chat/conversations")

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == 1
        assert data[0]["participant"]["id"] == test_user_2.id
        assert data[0]["last_message"]["content"] == "hey"
        assert data[0]["last_message_at"].endswith("Z")

    async def test_delete_by_participant(self, client, test_conversation):
        await client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={"content": "soon gone"}
        )

        response = await client.delete(f"/api/chat/conversation/{test_conversation.id}")

        assert response.status_code == 200
        assert response.json()["data"] == {
            "conversation_id": test_conversation.id,
            "messages_deleted": 1,
        }

        listed = await client.get("/api/chat/conversations")
        assert listed.json()["data"] == []

    async def test_delete_by_outsider_is_forbidden(
        self, client, test_user_3, auth_headers_for, test_conversation
    ):
        await client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={"content": "still here"}
        )

        response = await client.delete(
            f"/api/chat/conversation/{test_conversation.id}",
            headers=auth_headers_for(test_user_3)
        )

        assert response.status_code == 403

        messages = await client.get(f"/api/chat/conversation/{test_conversation.id}/messages")
        assert messages.json()["pagination"]["total"] == 1


class TestMessageAPI:
    """Test cases for message endpoints."""

    async def test_send_message(self, client, test_user, test_conversation):
        response = await client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={"content": "  Hello Bob  "}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        message = body["data"]
        assert message["content"] == "Hello Bob"
        assert message["sequence_number"] == 1
        assert message["sender"]["id"] == test_user.id
        assert [r["user_id"] for r in message["read_by"]] == [test_user.id]
        assert message["created_at"].endswith("Z")

    async def test_send_requires_auth(self, unauth_client, test_conversation):
        response = await unauth_client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={"content": "hi"}
        )

        assert response.status_code == 401

    async def test_send_blank_message(self, client, test_conversation):
        response = await client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={"content": "   "}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Message content is required"

    async def test_send_without_content_field(self, client, test_conversation):
        response = await client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={}
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_send_to_recipient_with_messages_disabled(
        self, client, db_session, test_user_2, test_conversation
    ):
        await UserRepository(db_session).update(
            test_user_2.id, message_permission=MessagePermission.NONE
        )

        response = await client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={"content": "hello?"}
        )

        assert response.status_code == 403

    async def test_send_into_seeded_conversation_with_existing_level(
        self, client, db_session, test_user_2, test_conversation
    ):
        await UserRepository(db_session).update(
            test_user_2.id, message_permission=MessagePermission.EXISTING
        )

        response = await client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={"content": "we already talk"}
        )

        assert response.status_code == 201

    async def test_send_to_missing_conversation(self, client):
        response = await client.post(
            "/api/chat/conversation/missing/messages",
            json={"content": "hello"}
        )

        assert response.status_code == 404

    async def test_get_messages_pagination(self, client, test_conversation):
        for i in range(1, 4):
            await client.post(
                f"/api/chat/conversation/{test_conversation.id}/messages",
                json={"content": f"message {i}"}
            )

        response = await client.get(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            params={"page": 1, "limit": 2}
        )

        assert response.status_code == 200
        body = response.json()
        assert [m["content"] for m in body["data"]] == ["message 2", "message 3"]
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    async def test_get_messages_as_outsider(
        self, unauth_client, test_user_3, auth_headers_for, test_conversation
    ):
        response = await unauth_client.get(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            headers=auth_headers_for(test_user_3)
        )

        assert response.status_code == 403

    async def test_mark_as_read(self, client, test_user_2, auth_headers_2, test_conversation):
        await client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={"content": "one"}
        )
        await client.post(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            json={"content": "two"}
        )

        before = await client.get("/api/chat/conversations", headers=auth_headers_2)
        assert before.json()["data"][0]["unread_count"] == 2

        response = await client.put(
            f"/api/chat/conversation/{test_conversation.id}/read",
            headers=auth_headers_2
        )

        assert response.status_code == 200
        assert response.json()["data"] == {
            "conversation_id": test_conversation.id,
            "marked_count": 2,
            "unread_count": 0,
        }

        after = await client.get("/api/chat/conversations", headers=auth_headers_2)
        assert after.json()["data"][0]["unread_count"] == 0

        messages = await client.get(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            headers=auth_headers_2
        )
        for message in messages.json()["data"]:
            assert test_user_2.id in {r["user_id"] for r in message["read_by"]}

    async def test_huge_page_is_rejected(self, client, test_conversation):
        response = await client.get(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            params={"page": 10**20, "limit": 50}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"][0]["field"] == "query.page"

    async def test_last_allowed_page_is_empty(self, client, test_conversation):
        response = await client.get(
            f"/api/chat/conversation/{test_conversation.id}/messages",
            params={"page": 1_000_000, "limit": 100}
        )

        assert response.status_code == 200
        assert response.json()["data"] == []
