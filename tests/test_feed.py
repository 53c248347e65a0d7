"""
Tests for feed likes, comments and their counters
"""

import pytest
from sqlmodel import select

from ashram_connect.core.tenant import GLOBAL_SCOPE
from ashram_connect.models import AppRole, FeedPost, PostComment, PostLike
from ashram_connect.services.feed import FeedService


@pytest.fixture
def post(db, test_ashram):
    post = FeedPost(ashram_id=test_ashram.id, title="Sports day", content="Our kids ran the relay!")
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def like_rows(db, post):
    return db.exec(select(PostLike).where(PostLike.post_id == post.id)).all()


class TestFeedService:
    """Counters move together with their rows"""

    def test_like_twice_is_one_like(self, db, post, user):
        service = FeedService(db)

        assert service.like(post, user.id) is True
        assert service.like(post, user.id) is False

        assert post.likes_count == 1
        assert len(like_rows(db, post)) == 1

    def test_unlike(self, db, post, user):
        service = FeedService(db)
        service.like(post, user.id)

        assert service.unlike(post, user.id) is True
        assert service.unlike(post, user.id) is False
        assert post.likes_count == 0
        assert like_rows(db, post) == []

    def test_likes_from_different_users(self, db, post, user, admin_user):
        service = FeedService(db)
        service.like(post, user.id)
        service.like(post, admin_user.id)
        assert post.likes_count == 2

    def test_comments_count_and_order(self, db, post, user):
        service = FeedService(db)
        service.add_comment(post, user.id, "Well done!")
        service.add_comment(post, user.id, "Go team")

        assert post.comments_count == 2
        assert [c.content for c in service.list_comments(post)] == ["Well done!", "Go team"]

    def test_list_posts_has_liked(self, db, post, user):
        other = FeedPost(title="Art class", content="Paintings")
        db.add(other)
        db.commit()

        service = FeedService(db)
        service.like(post, user.id)

        liked = {p.id: has_liked for p, has_liked in service.list_posts(GLOBAL_SCOPE, user.id)}
        assert liked == {post.id: True, other.id: False}

        anonymous = service.list_posts(GLOBAL_SCOPE, None)
        assert all(has_liked is False for _, has_liked in anonymous)


class TestFeedEndpoints:
    """Feed API"""

    def test_like_requires_sign_in(self, client, post):
        response = client.post(f"/api/v1/feed/{post.id}/like")
        assert response.status_code == 401

    def test_like_is_idempotent(self, client, post, user, auth_headers):
        headers = auth_headers(user)

        client.post(f"/api/v1/feed/{post.id}/like", headers=headers)
        response = client.post(f"/api/v1/feed/{post.id}/like", headers=headers)

        assert response.status_code == 200
        assert response.json()["likes_count"] == 1
        assert response.json()["has_liked"] is True

        posts = client.get("/api/v1/feed/", headers=headers).json()
        assert posts[0]["has_liked"] is True

    def test_unlike(self, client, post, user, auth_headers):
        headers = auth_headers(user)
        client.post(f"/api/v1/feed/{post.id}/like", headers=headers)

        response = client.delete(f"/api/v1/feed/{post.id}/like", headers=headers)
        assert response.json()["likes_count"] == 0
        assert response.json()["has_liked"] is False

    def test_comment(self, client, db, post, user, auth_headers):
        response = client.post(
            f"/api/v1/feed/{post.id}/comments",
            json={"content": "Beautiful"},
            headers=auth_headers(user),
        )
        assert response.status_code == 201

        comments = client.get(f"/api/v1/feed/{post.id}/comments").json()
        assert [c["content"] for c in comments] == ["Beautiful"]
        assert len(db.exec(select(PostComment)).all()) == 1

    def test_post_outside_scope_is_not_found(self, client, post, other_ashram, user, auth_headers):
        response = client.post(f"/api/v1/tenant/riverside/feed/{post.id}/like", headers=auth_headers(user))
        assert response.status_code == 404

    def test_create_post_requires_feed_management(self, client, user, sub_admin_user, auth_headers):
        payload = {"title": "Diwali", "content": "Lamps everywhere"}
        assert client.post("/api/v1/feed/", json=payload, headers=auth_headers(user)).status_code == 403

        response = client.post("/api/v1/feed/", json=payload, headers=auth_headers(sub_admin_user, AppRole.SUB_ADMIN))
        assert response.status_code == 201
        assert response.json()["likes_count"] == 0

    def test_empty_post_is_rejected(self, client, sub_admin_user, auth_headers):
        response = client.post("/api/v1/feed/", json={"title": "Nothing"}, headers=auth_headers(sub_admin_user, AppRole.SUB_ADMIN))
        assert response.status_code == 400
