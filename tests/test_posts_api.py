import os
from io import BytesIO

import pytest

from postboard.extensions import db
from postboard.models import Comment, Post
from tests.conftest import make_image_bytes


def post_form(**overrides):
    form = {
        "title": "My first trip",
        "description": "Three days walking along the coast",
        "category": "travel",
        "image": (BytesIO(make_image_bytes()), "photo.png"),
    }
    form.update(overrides)
    return {key: value for key, value in form.items() if value is not None}


@pytest.fixture
def alice(make_user):
    return make_user("alice")


class TestCreatePost:
    def test_created_with_image(self, app, client, alice, auth_header, assets):
        response = client.post("/api/posts", data=post_form(), headers=auth_header(alice))

        assert response.status_code == 201
        body = response.get_json()
        assert body["title"] == "My first trip"
        assert body["user"] == alice
        assert body["likes"] == []
        assert body["image"]["publicId"] in assets.objects
        assert body["image"]["url"].startswith("https://cdn.test/")
        assert os.listdir(app.config["UPLOAD_FOLDER"]) == []

    def test_requires_token(self, client):
        response = client.post("/api/posts", data=post_form())
        assert response.status_code == 401
        assert response.get_json() == {"message": "no token provided or token is invalid"}

    def test_missing_image(self, client, alice, auth_header):
        response = client.post("/api/posts", data=post_form(image=None), headers=auth_header(alice))
        assert response.status_code == 400
        assert response.get_json() == {"message": "no image provided"}

    def test_invalid_title(self, client, alice, auth_header, assets):
        response = client.post("/api/posts", data=post_form(title="H"), headers=auth_header(alice))
        assert response.status_code == 400
        assert "title" in response.get_json()["message"]
        assert assets.objects == {}

    def test_not_an_image(self, client, alice, auth_header):
        response = client.post(
            "/api/posts",
            data=post_form(image=(BytesIO(b"plain text"), "notes.txt")),
            headers=auth_header(alice),
        )
        assert response.status_code == 400
        assert "Unsupported file format" in response.get_json()["message"]

    def test_upload_failure_is_a_server_error(self, app, client, alice, auth_header, assets):
        assets.fail_upload = True
        response = client.post("/api/posts", data=post_form(), headers=auth_header(alice))
        assert response.status_code == 500
        assert "message" in response.get_json()
        with app.app_context():
            assert Post.query.count() == 0


class TestReadPosts:
    def test_list_attaches_profiles(self, client, alice, seed_post):
        seed_post(alice, minutes=1)
        seed_post(alice, minutes=2)

        response = client.get("/api/posts")

        assert response.status_code == 200
        body = response.get_json()
        assert len(body) == 2
        assert body[0]["createdAt"] > body[1]["createdAt"]
        assert body[0]["user"]["username"] == "alice"

    def test_pagination(self, client, alice, seed_post):
        ids = [seed_post(alice, minutes=m) for m in range(5)]

        first = client.get("/api/posts?pageNumber=1").get_json()
        second = client.get("/api/posts?pageNumber=2").get_json()
        third = client.get("/api/posts?pageNumber=3").get_json()

        assert [p["id"] for p in first] == ids[::-1][:3]
        assert [p["id"] for p in second] == ids[::-1][3:]
        assert third == []

    def test_bad_page_number(self, client):
        response = client.get("/api/posts?pageNumber=zero")
        assert response.status_code == 400

    def test_category_filter(self, client, alice, seed_post):
        seed_post(alice, category="food")
        seed_post(alice, minutes=1, category="travel")

        body = client.get("/api/posts?category=food").get_json()

        assert [p["category"] for p in body] == ["food"]

    def test_count(self, client, alice, seed_post):
        assert client.get("/api/posts/count").get_json() == 0
        seed_post(alice)
        assert client.get("/api/posts/count").get_json() == 1

    def test_single_post_includes_comments(self, client, alice, seed_post, seed_comment):
        post_id = seed_post(alice)
        seed_comment(post_id, alice, text="first")
        seed_comment(post_id, alice, text="second")

        response = client.get(f"/api/posts/{post_id}")

        assert response.status_code == 200
        body = response.get_json()
        assert body["id"] == post_id
        assert body["user"]["username"] == "alice"
        assert sorted(c["text"] for c in body["comments"]) == ["first", "second"]

    def test_missing_post(self, client):
        response = client.get("/api/posts/9999")
        assert response.status_code == 404
        assert response.get_json() == {"message": "post not found"}

    def test_id_too_large_for_the_database(self, client):
        response = client.get("/api/posts/99999999999999999999")
        assert response.status_code == 404
        assert "message" in response.get_json()

    def test_page_number_too_large_for_the_database(self, client):
        response = client.get("/api/posts?pageNumber=99999999999999999999")
        assert response.status_code == 400


class TestDeletePost:
    def test_owner_delete_cascades(self, app, client, alice, auth_header, seed_post,
                                   seed_comment, assets):
        post_id = seed_post(alice, storage_id="posts/trip.png")
        seed_comment(post_id, alice)

        response = client.delete(f"/api/posts/{post_id}", headers=auth_header(alice))

        assert response.status_code == 200
        assert response.get_json() == {
            "message": "post has been deleted successfully",
            "postId": post_id,
        }
        assert assets.removed == ["posts/trip.png"]
        with app.app_context():
            assert db.session.get(Post, post_id) is None
            assert Comment.query.filter_by(post_id=post_id).count() == 0

    def test_admin_may_delete(self, client, alice, make_user, auth_header, seed_post):
        admin = make_user("root", is_admin=True)
        post_id = seed_post(alice)
        response = client.delete(f"/api/posts/{post_id}", headers=auth_header(admin))
        assert response.status_code == 200

    def test_stranger_forbidden(self, client, alice, make_user, auth_header, seed_post):
        stranger = make_user("mallory")
        post_id = seed_post(alice)
        response = client.delete(f"/api/posts/{post_id}", headers=auth_header(stranger))
        assert response.status_code == 403
        assert response.get_json() == {"message": "access denied, forbidden"}

    def test_missing_post(self, client, alice, auth_header):
        response = client.delete("/api/posts/9999", headers=auth_header(alice))
        assert response.status_code == 404


class TestUpdatePost:
    def test_owner_updates_fields(self, client, alice, auth_header, seed_post):
        post_id = seed_post(alice, title="Before")

        response = client.put(
            f"/api/posts/{post_id}",
            json={"title": "After", "description": "An updated description"},
            headers=auth_header(alice),
        )

        assert response.status_code == 200
        body = response.get_json()
        assert body["title"] == "After"
        assert body["category"] == "travel"
        assert body["user"]["username"] == "alice"

    def test_admin_cannot_update(self, client, alice, make_user, auth_header, seed_post):
        admin = make_user("root", is_admin=True)
        post_id = seed_post(alice)
        response = client.put(
            f"/api/posts/{post_id}", json={"title": "Hijacked"}, headers=auth_header(admin)
        )
        assert response.status_code == 403

    def test_unknown_fields_rejected(self, client, alice, auth_header, seed_post):
        post_id = seed_post(alice)
        response = client.put(
            f"/api/posts/{post_id}", json={"likes": [1]}, headers=auth_header(alice)
        )
        assert response.status_code == 400
        assert response.get_json() == {"message": '"likes" is not allowed'}

    def test_malformed_json_body(self, client, alice, auth_header, seed_post):
        post_id = seed_post(alice, title="Before")
        response = client.put(
            f"/api/posts/{post_id}",
            data='{"title": "After"',
            content_type="application/json",
            headers=auth_header(alice),
        )
        assert response.status_code == 400
        assert response.get_json() == {"message": "request body must be valid JSON"}
        assert client.get(f"/api/posts/{post_id}").get_json()["title"] == "Before"

    def test_update_image(self, client, alice, auth_header, seed_post, assets):
        post_id = seed_post(alice, storage_id="posts/old.png")

        response = client.put(
            f"/api/posts/update-image/{post_id}",
            data={"image": (BytesIO(make_image_bytes()), "new.png")},
            headers=auth_header(alice),
        )

        assert response.status_code == 200
        body = response.get_json()
        assert body["image"]["publicId"] in assets.objects
        assert assets.removed == ["posts/old.png"]

    def test_update_image_without_file(self, client, alice, auth_header, seed_post):
        post_id = seed_post(alice)
        response = client.put(f"/api/posts/update-image/{post_id}", headers=auth_header(alice))
        assert response.status_code == 400
        assert response.get_json() == {"message": "no image provided"}


class TestLikes:
    def test_toggle(self, client, alice, make_user, auth_header, seed_post):
        fan = make_user("bob")
        post_id = seed_post(alice)

        liked = client.put(f"/api/posts/like/{post_id}", headers=auth_header(fan))
        unliked = client.put(f"/api/posts/like/{post_id}", headers=auth_header(fan))

        assert liked.get_json()["likes"] == [fan]
        assert unliked.get_json()["likes"] == []

    def test_requires_token(self, client, alice, seed_post):
        post_id = seed_post(alice)
        assert client.put(f"/api/posts/like/{post_id}").status_code == 401
