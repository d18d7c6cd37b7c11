import boto3
import pytest
from botocore.stub import ANY, Stubber

from postboard.services.asset_store import (
    AssetRemoveError, AssetStoreError, AssetUploadError, S3AssetStore
)
from tests.conftest import make_image_bytes


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="eu-west-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubber(s3_client):
    with Stubber(s3_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def store(s3_client):
    return S3AssetStore(
        bucket_name="postboard-images",
        region="eu-west-1",
        access_key_id="testing",
        secret_access_key="testing",
        client=s3_client,
    )


@pytest.fixture
def photo(tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(make_image_bytes())
    return str(path)


def test_upload_returns_url_and_key(store, stubber, photo):
    stubber.add_response("put_object", {"ETag": '"abc"'}, {
        "Bucket": "postboard-images",
        "Key": ANY,
        "Body": ANY,
        "ContentType": "image/png",
        "CacheControl": ANY,
        "Metadata": ANY,
    })

    reference = store.upload(photo)

    assert reference.storage_id.startswith("posts/")
    assert reference.storage_id.endswith(".png")
    assert reference.url == (
        f"https://postboard-images.s3.eu-west-1.amazonaws.com/{reference.storage_id}"
    )


def test_upload_keys_are_unique(store, stubber, photo):
    for _ in range(2):
        stubber.add_response("put_object", {}, None)
    first = store.upload(photo)
    second = store.upload(photo)
    assert first.storage_id != second.storage_id


def test_upload_rejected_by_s3(store, stubber, photo):
    stubber.add_client_error("put_object", service_error_code="AccessDenied",
                             http_status_code=403)
    with pytest.raises(AssetUploadError) as exc_info:
        store.upload(photo)
    assert "AccessDenied" in exc_info.value.message


def test_upload_of_missing_file(store, tmp_path):
    with pytest.raises(AssetUploadError):
        store.upload(str(tmp_path / "gone.png"))


def test_remove(store, stubber):
    stubber.add_response("delete_object", {}, {
        "Bucket": "postboard-images",
        "Key": "posts/old.png",
    })
    store.remove("posts/old.png")


def test_remove_failure(store, stubber):
    stubber.add_client_error("delete_object", service_error_code="InternalError",
                             http_status_code=500)
    with pytest.raises(AssetRemoveError):
        store.remove("posts/old.png")


def test_cdn_domain_is_used_for_urls(s3_client):
    store = S3AssetStore("postboard-images", cdn_domain="img.example.com/", client=s3_client)
    assert store.public_url("posts/a.png") == "https://img.example.com/posts/a.png"


def test_missing_configuration_fails_on_first_use(photo):
    store = S3AssetStore(bucket_name=None)
    with pytest.raises(AssetStoreError):
        store.client
    with pytest.raises(AssetUploadError):
        store.upload(photo)


def test_validate_configuration(store, stubber):
    stubber.add_response("head_bucket", {}, {"Bucket": "postboard-images"})
    assert store.validate_configuration()["success"] is True

    stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
    result = store.validate_configuration()
    assert result["success"] is False
    assert "404" in result["error"]


def test_from_config():
    store = S3AssetStore.from_config({
        "S3_BUCKET_NAME": "bucket",
        "AWS_REGION": "us-east-1",
        "S3_IMAGES_PREFIX": "/images/",
    })
    assert store.bucket_name == "bucket"
    assert store.prefix == "images"
    assert store.public_url("images/x.jpg") == "https://bucket.s3.us-east-1.amazonaws.com/images/x.jpg"
