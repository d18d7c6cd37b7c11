"""S3-backed asset store for post images."""
import os
import uuid
import logging
import mimetypes
import threading
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import boto3
from botocore.exceptions import ClientError, BotoCoreError

from postboard.errors import ServiceError
from postboard.models.base import utcnow

logger = logging.getLogger(__name__)


class AssetStoreError(ServiceError):
    """Base exception for object store failures."""
    status_code = 500


class AssetUploadError(AssetStoreError):
    """Upload to the object store failed."""
    pass


class AssetRemoveError(AssetStoreError):
    """Removal from the object store failed."""
    pass


@dataclass(frozen=True)
class AssetReference:
    """Stable reference to an uploaded asset."""
    url: str
    storage_id: str


class S3AssetStore:
    """
    Asset store gateway backed by Amazon S3.

    Exposes ``upload(local_path)`` and ``remove(storage_id)``. The boto3
    client is created on first use, so an application without S3
    credentials still boots and only fails when an image is sent.
    """

    REQUIRED_SETTINGS = ('bucket_name', 'access_key_id', 'secret_access_key')

    def __init__(self, bucket_name: Optional[str], region: str = 'us-west-2',
                 access_key_id: Optional[str] = None,
                 secret_access_key: Optional[str] = None,
                 prefix: str = 'posts', cdn_domain: Optional[str] = None,
                 client: Any = None):
        self.bucket_name = bucket_name
        self.aws_region = region
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.prefix = prefix.strip('/')
        self.cdn_domain = cdn_domain
        self._client = client
        self._client_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "S3AssetStore":
        """Build the gateway from Flask configuration."""
        return cls(
            bucket_name=config.get('S3_BUCKET_NAME'),
            region=config.get('AWS_REGION', 'us-west-2'),
            access_key_id=config.get('AWS_ACCESS_KEY_ID'),
            secret_access_key=config.get('AWS_SECRET_ACCESS_KEY'),
            prefix=config.get('S3_IMAGES_PREFIX', 'posts'),
            cdn_domain=config.get('IMAGE_CDN_DOMAIN'),
        )

    @property
    def client(self):
        """boto3 S3 client, initialized on first access."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = self._initialize_s3_client()
        return self._client

    def _initialize_s3_client(self):
        """Initialize boto3 S3 client with proper credentials."""
        missing = [name for name in self.REQUIRED_SETTINGS if not getattr(self, name)]
        if missing:
            raise AssetStoreError(f"Missing required S3 configuration: {missing}")

        try:
            client = boto3.client(
                's3',
                aws_access_key_id=self.access_key_id,
                aws_secret_access_key=self.secret_access_key,
                region_name=self.aws_region
            )
        except (BotoCoreError, ValueError) as e:
            logger.error(f"Failed to initialize S3 client: {e}")
            raise AssetStoreError(f"S3 client initialization failed: {e}")

        logger.info("S3 client initialized successfully")
        return client

    def _generate_key(self, local_path: str) -> str:
        """Generate a unique object key keeping the file extension."""
        _, ext = os.path.splitext(local_path.lower())
        timestamp = utcnow().strftime('%Y%m%d_%H%M%S')
        filename = f"{timestamp}_{uuid.uuid4()}{ext}"
        return f"{self.prefix}/{filename}" if self.prefix else filename

    def public_url(self, key: str) -> str:
        """Public URL of an object."""
        if self.cdn_domain:
            return f"https://{self.cdn_domain.rstrip('/')}/{key}"
        return f"https://{self.bucket_name}.s3.{self.aws_region}.amazonaws.com/{key}"

    def upload(self, local_path: str) -> AssetReference:
        """
        Upload a local file.

        Args:
            local_path: Path of the file to upload

        Returns:
            AssetReference with the public URL and the object key

        Raises:
            AssetUploadError: If the file cannot be read or S3 rejects it
        """
        key = self._generate_key(local_path)
        content_type = mimetypes.guess_type(local_path)[0] or 'application/octet-stream'

        try:
            client = self.client
            with open(local_path, 'rb') as body:
                client.put_object(
                    Bucket=self.bucket_name,
                    Key=key,
                    Body=body,
                    ContentType=content_type,
                    CacheControl='public, max-age=31536000',  # 1 year cache
                    Metadata={
                        'uploaded_at': utcnow().isoformat(),
                        'service': 'postboard-upload'
                    }
                )
        except ClientError as e:
            error_code = e.response['Error']['Code']
            logger.error(f"S3 upload failed ({error_code}): {e}")
            raise AssetUploadError(f"S3 upload failed: {error_code}")
        except (BotoCoreError, OSError, AssetStoreError) as e:
            logger.error(f"S3 upload failed for {local_path}: {e}")
            raise AssetUploadError(f"Upload failed: {e}")

        logger.info(f"Successfully uploaded to S3: {key}")
        return AssetReference(url=self.public_url(key), storage_id=key)

    def remove(self, storage_id: str) -> None:
        """
        Delete an object.

        Raises:
            AssetRemoveError: If S3 reports a failure
        """
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=storage_id)
        except ClientError as e:
            error_code = e.response['Error']['Code']
            logger.error(f"Failed to delete from S3 ({storage_id}): {error_code}")
            raise AssetRemoveError(f"S3 delete failed: {error_code}")
        except (BotoCoreError, AssetStoreError) as e:
            logger.error(f"Failed to delete from S3 ({storage_id}): {e}")
            raise AssetRemoveError(f"Delete failed: {e}")

        logger.info(f"Successfully deleted from S3: {storage_id}")

    def validate_configuration(self) -> Dict[str, Any]:
        """Validate S3 configuration and connectivity."""
        try:
            self.client.head_bucket(Bucket=self.bucket_name)
            return {
                'success': True,
                'bucket_name': self.bucket_name,
                'region': self.aws_region,
                'status': 'connected'
            }
        except ClientError as e:
            error_code = e.response['Error']['Code']
            return {
                'success': False,
                'error': f"S3 access error: {error_code}",
                'bucket_name': self.bucket_name,
                'region': self.aws_region,
                'status': 'error'
            }
        except (BotoCoreError, AssetStoreError) as e:
            return {
                'success': False,
                'error': f"Configuration validation failed: {e}",
                'status': 'error'
            }
