from datetime import datetime, timedelta
from io import BytesIO
from itertools import count

import pytest
from PIL import Image

from postboard import create_app
from postboard.auth import generate_token
from postboard.extensions import db
from postboard.models import Comment, Post, User
from postboard.services.asset_store import (
    AssetReference, AssetRemoveError, AssetUploadError
)


class FakeAssetStore:
    """In-memory stand-in for the S3 gateway."""

    def __init__(self):
        self.objects = {}
        self.removed = []
        self.fail_upload = False
        self.fail_remove = False
        self._ids = count(1)

    def upload(self, local_path):
        if self.fail_upload:
            raise AssetUploadError("S3 upload failed: ServiceUnavailable")
        with open(local_path, "rb") as f:
            content = f.read()
        storage_id = f"posts/asset-{next(self._ids)}.png"
        self.objects[storage_id] = content
        return AssetReference(url=f"https://cdn.test/{storage_id}", storage_id=storage_id)

    def remove(self, storage_id):
        self.removed.append(storage_id)
        if self.fail_remove:
            raise AssetRemoveError("S3 delete failed: InternalError")
        self.objects.pop(storage_id, None)


def make_image_bytes(fmt="PNG"):
    image = Image.new("RGB", (64, 48), color=(0, 200, 100))
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def assets():
    return FakeAssetStore()


@pytest.fixture
def app(assets, tmp_path):
    app = create_app("testing", asset_store=assets)
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Create a user and return its id."""
    def _make_user(username, is_admin=False):
        with app.app_context():
            user = User.create(
                username=username,
                email=f"{username}@example.com",
                password_hash="not-a-real-hash",
                is_admin=is_admin,
            )
            return user.id
    return _make_user


@pytest.fixture
def auth_header(app):
    def _auth_header(user_id):
        with app.app_context():
            return {"Authorization": f"Bearer {generate_token(user_id)}"}
    return _auth_header


@pytest.fixture
def image_file(tmp_path):
    """Write a PNG to disk, as the upload route would, and return its path."""
    names = count(1)

    def _image_file():
        path = tmp_path / f"upload-{next(names)}.png"
        path.write_bytes(make_image_bytes())
        return str(path)
    return _image_file


@pytest.fixture
def seed_post(app):
    """Insert a post directly with a chosen creation time; returns its id."""
    base = datetime(2024, 1, 1, 12, 0, 0)

    def _seed_post(user_id, minutes=0, category="travel", title="Seeded post",
                   storage_id="posts/seeded.png"):
        with app.app_context():
            post = Post(
                title=title,
                description="A seeded description",
                category=category,
                user_id=user_id,
                image_url=f"https://cdn.test/{storage_id}",
                image_storage_id=storage_id,
                created_at=base + timedelta(minutes=minutes),
            )
            db.session.add(post)
            db.session.commit()
            return post.id
    return _seed_post


@pytest.fixture
def seed_comment(app):
    def _seed_comment(post_id, user_id, text="Nice post", username="someone"):
        with app.app_context():
            comment = Comment.create(post_id=post_id, user_id=user_id, text=text, username=username)
            return comment.id
    return _seed_comment
