import boto3
from typing import Any, Dict, List, Optional
from botocore.exceptions import ClientError
from doggy_delights.settings import settings
import logging

log = logging.getLogger(__name__)

# -------------------------
# S3 Service
# -------------------------
class S3Service:
    def __init__(self):
        session = boto3.session.Session(region_name=settings.aws_region)
        kwargs = {
            "aws_access_key_id": settings.aws_access_key_id,
            "aws_secret_access_key": settings.aws_secret_access_key,
        }
        if settings.aws_endpoint_url:
            kwargs["endpoint_url"] = settings.aws_endpoint_url

        self.client = session.client("s3", **kwargs)
        log.info("Initialized S3 client")

        # Ensure bucket exists at initialization
        self.ensure_bucket()

    def ensure_bucket(self):
        try:
            self.client.head_bucket(Bucket=settings.s3_bucket)
            log.debug("Bucket %s already exists", settings.s3_bucket)
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code in ("404", "NoSuchBucket"):
                self.client.create_bucket(Bucket=settings.s3_bucket)
                log.info("Created bucket %s", settings.s3_bucket)
            else:
                log.error("Failed to check/create bucket: %s", e)
                raise

    def store(self, fileobj, key: str, content_type: str) -> str:
        """Writes one object and returns its public URL."""
        self.client.upload_fileobj(
            Fileobj=fileobj,
            Bucket=settings.s3_bucket,
            Key=key,
            ExtraArgs={"ContentType": content_type},
        )
        log.debug("Uploaded s3://%s/%s", settings.s3_bucket, key)
        return self.object_url(key)

    def object_url(self, key: str) -> str:
        if settings.public_base_url:
            return f"{settings.public_base_url.rstrip('/')}/{key}"
        url = self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.s3_bucket, "Key": key},
            ExpiresIn=settings.presign_expire_seconds,
        )
        if settings.external_endpoint and settings.aws_endpoint_url:
            url = url.replace(settings.aws_endpoint_url, settings.external_endpoint)
        return url

    def list(self, prefix: str, max_results: int) -> List[Dict[str, Any]]:
        """Lists at most max_results objects under prefix, in the store's order."""
        resp = self.client.list_objects_v2(
            Bucket=settings.s3_bucket,
            Prefix=prefix,
            MaxKeys=max_results,
        )
        # The object key is the only stable per-object id S3 hands back.
        return [
            {
                "key": obj["Key"],
                "url": self.object_url(obj["Key"]),
                "asset_id": obj["Key"],
            }
            for obj in resp.get("Contents", [])[:max_results]
        ]

    def delete_batch(self, keys: List[str]) -> List[Dict[str, Any]]:
        """Deletes up to delete_batch_size keys in one call, returns per-key errors."""
        if len(keys) > settings.delete_batch_size:
            raise ValueError(
                f"Batch of {len(keys)} keys exceeds limit of {settings.delete_batch_size}"
            )
        resp = self.client.delete_objects(
            Bucket=settings.s3_bucket,
            Delete={"Objects": [{"Key": k} for k in keys], "Quiet": True},
        )
        errors = resp.get("Errors", [])
        log.debug("Deleted batch of %d keys from s3://%s (%d errors)", len(keys), settings.s3_bucket, len(errors))
        return errors

    def close(self):
        log.info("Closed S3 client")
