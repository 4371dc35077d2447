"""
Integration tests for Thread API endpoints, including comments.
"""


NEW_THREAD = {
    "title": "Pairing partner for a Rust CLI?",
    "content": "Building a TUI log viewer and would love a second pair of eyes.",
    "category": "Collaboration",
    "tags": ["rust", "tui"],
}


class TestThreadAPI:
    """Test cases for thread endpoints."""

    async def test_list_is_public(self, unauth_client, test_thread):
        response = await unauth_client.get("/api/threads")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [t["id"] for t in body["data"]] == [test_thread.id]
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}
        assert body["data"][0]["author"]["username"] == "alice"
        assert body["data"][0]["comment_count"] == 0

    async def test_list_filters_and_sort(self, client, test_thread):
        await client.post("/api/threads", json=NEW_THREAD)

        questions = await client.get("/api/threads", params={"category": "questions"})
        assert [t["id"] for t in questions.json()["data"]] == [test_thread.id]

        searched = await client.get("/api/threads", params={"search": "rust viewer"})
        assert [t["title"] for t in searched.json()["data"]] == [NEW_THREAD["title"]]

        oldest = await client.get("/api/threads", params={"sort": "oldest"})
        assert oldest.json()["data"][0]["id"] == test_thread.id

    async def test_list_rejects_unknown_sort(self, unauth_client):
        response = await unauth_client.get("/api/threads", params={"sort": "random"})

        assert response.status_code == 400
        assert response.json()["error"][0]["field"] == "query.sort"

    async def test_list_rejects_huge_page(self, unauth_client):
        response = await unauth_client.get("/api/threads", params={"page": 10**20})

        assert response.status_code == 400

    async def test_create(self, client, test_user):
        response = await client.post("/api/threads", json=NEW_THREAD)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == NEW_THREAD["title"]
        assert data["category"] == "Collaboration"
        assert data["author"]["id"] == test_user.id
        assert data["vote_score"] == 0
        assert data["user_vote"] is None
        assert data["created_at"].endswith("Z")

    async def test_create_requires_auth(self, unauth_client):
        response = await unauth_client.post("/api/threads", json=NEW_THREAD)

        assert response.status_code == 401

    async def test_create_rejects_unknown_category(self, client):
        response = await client.post("/api/threads", json={**NEW_THREAD, "category": "Memes"})

        assert response.status_code == 400
        assert response.json()["error"][0]["field"] == "body.category"

    async def test_create_rejects_long_title(self, client):
        response = await client.post("/api/threads", json={**NEW_THREAD, "title": "x" * 201})

        assert response.status_code == 400

    async def test_user_threads(self, client, unauth_client, test_user, test_user_2, auth_headers_2, test_thread):
        await client.post("/api/threads", json=NEW_THREAD, headers=auth_headers_2)

        response = await unauth_client.get(f"/api/threads/user/{test_user.id}")

        assert response.status_code == 200
        assert [t["id"] for t in response.json()["data"]] == [test_thread.id]

        bobs = await unauth_client.get(f"/api/threads/user/{test_user_2.id}")
        assert bobs.json()["pagination"]["total"] == 1

    async def test_get_counts_views(self, unauth_client, auth_headers_2, test_thread):
        await unauth_client.get(f"/api/threads/{test_thread.id}", headers=auth_headers_2)
        await unauth_client.get(f"/api/threads/{test_thread.id}", headers=auth_headers_2)
        response = await unauth_client.get(f"/api/threads/{test_thread.id}")

        assert response.status_code == 200
        assert response.json()["data"]["views"] == 2

    async def test_get_missing(self, unauth_client):
        response = await unauth_client.get("/api/threads/missing")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Thread not found"}

    async def test_update_by_author(self, client, test_thread):
        response = await client.put(
            f"/api/threads/{test_thread.id}",
            json={"content": "Any font with a slashed zero will do."}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["content"] == "Any font with a slashed zero will do."
        assert data["title"] == test_thread.title

    async def test_update_by_other_user(self, client, auth_headers_2, test_thread):
        response = await client.put(
            f"/api/threads/{test_thread.id}",
            json={"title": "Hijacked"},
            headers=auth_headers_2
        )

        assert response.status_code == 403

    async def test_delete(self, client, auth_headers_2, test_thread):
        forbidden = await client.delete(f"/api/threads/{test_thread.id}", headers=auth_headers_2)
        assert forbidden.status_code == 403

        response = await client.delete(f"/api/threads/{test_thread.id}")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Thread deleted successfully"}

        missing = await client.get(f"/api/threads/{test_thread.id}")
        assert missing.status_code == 404

    async def test_vote(self, client, auth_headers_2, test_thread):
        up = await client.put(
            f"/api/threads/{test_thread.id}/vote",
            json={"vote_type": "upvote"},
            headers=auth_headers_2
        )
        assert up.status_code == 200
        assert up.json()["data"] == {
            "vote_score": 1,
            "upvotes": 1,
            "downvotes": 0,
            "user_vote": "upvote",
        }

        down = await client.put(
            f"/api/threads/{test_thread.id}/vote",
            json={"vote_type": "downvote"},
            headers=auth_headers_2
        )
        assert down.json()["data"]["vote_score"] == -1

        thread = await client.get(f"/api/threads/{test_thread.id}", headers=auth_headers_2)
        assert thread.json()["data"]["user_vote"] == "downvote"

    async def test_vote_rejects_unknown_type(self, client, test_thread):
        response = await client.put(f"/api/threads/{test_thread.id}/vote", json={"vote_type": "sideways"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_toggle_like(self, client, auth_headers_2, test_thread):
        liked = await client.put(f"/api/threads/{test_thread.id}/like", headers=auth_headers_2)
        assert liked.json()["data"] == {"likes": 1, "is_liked": True}

        unliked = await client.put(f"/api/threads/{test_thread.id}/like", headers=auth_headers_2)
        assert unliked.json()["data"] == {"likes": 0, "is_liked": False}


class TestCommentAPI:
    """Test cases for comment endpoints."""

    async def test_add_and_list(self, client, auth_headers_2, test_user_2, test_thread):
        created = await client.post(
            f"/api/threads/{test_thread.id}/comments",
            json={"content": "Berkeley Mono"},
            headers=auth_headers_2
        )
        assert created.status_code == 201
        top = created.json()["data"]
        assert top["author"]["id"] == test_user_2.id
        assert top["replies"] == []

        reply = await client.post(
            f"/api/threads/{test_thread.id}/comments",
            json={"content": "Pricey but lovely", "parent_comment": top["id"]}
        )
        assert reply.status_code == 201

        response = await client.get(f"/api/threads/{test_thread.id}/comments")

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}
        assert body["data"][0]["id"] == top["id"]
        assert [r["content"] for r in body["data"][0]["replies"]] == ["Pricey but lovely"]

        thread = await client.get(f"/api/threads/{test_thread.id}")
        assert thread.json()["data"]["comment_count"] == 2

    async def test_add_requires_auth(self, unauth_client, test_thread):
        response = await unauth_client.post(
            f"/api/threads/{test_thread.id}/comments",
            json={"content": "hi"}
        )

        assert response.status_code == 401

    async def test_add_blank_comment(self, client, test_thread):
        response = await client.post(
            f"/api/threads/{test_thread.id}/comments",
            json={"content": "   "}
        )

        assert response.status_code == 400

    async def test_comments_of_missing_thread(self, unauth_client):
        response = await unauth_client.get("/api/threads/missing/comments")

        assert response.status_code == 404

    async def test_update_and_delete(self, client, auth_headers_2, test_thread):
        created = await client.post(
            f"/api/threads/{test_thread.id}/comments",
            json={"content": "Typo here"}
        )
        comment_id = created.json()["data"]["id"]

        forbidden = await client.put(
            f"/api/threads/comments/{comment_id}",
            json={"content": "Not mine"},
            headers=auth_headers_2
        )
        assert forbidden.status_code == 403

        updated = await client.put(f"/api/threads/comments/{comment_id}", json={"content": "Fixed"})
        assert updated.status_code == 200
        assert updated.json()["data"]["is_edited"] is True

        deleted = await client.delete(f"/api/threads/comments/{comment_id}")
        assert deleted.json() == {"success": True, "message": "Comment deleted successfully"}

        missing = await client.delete(f"/api/threads/comments/{comment_id}")
        assert missing.status_code == 404

    async def test_comment_like_and_vote(self, client, auth_headers_2, test_thread):
        created = await client.post(
            f"/api/threads/{test_thread.id}/comments",
            json={"content": "Vote on me"}
        )
        comment_id = created.json()["data"]["id"]

        liked = await client.put(f"/api/threads/comments/{comment_id}/like", headers=auth_headers_2)
        assert liked.json()["data"] == {"likes": 1, "is_liked": True}

        voted = await client.put(
            f"/api/threads/comments/{comment_id}/vote",
            json={"vote_type": "downvote"},
            headers=auth_headers_2
        )
        assert voted.json()["data"] == {
            "vote_score": -1,
            "upvotes": 0,
            "downvotes": 1,
            "user_vote": "downvote",
        }

        listed = await client.get(f"/api/threads/{test_thread.id}/comments", headers=auth_headers_2)
        comment = listed.json()["data"][0]
        assert comment["is_liked"] is True
        assert comment["user_vote"] == "downvote"
