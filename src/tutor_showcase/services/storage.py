"""Object storage gateway for showcase documents and images."""

import logging
from dataclasses import dataclass
from typing import Protocol

from tutor_showcase.domain.showcase import StorageRef
from tutor_showcase.errors import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)

SIGNED_URL_TTL_SECONDS = 24 * 60 * 60


class ObjectStore(Protocol):
    """Interface for a bucketed object store."""

    def put(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        """Write bytes under a key."""

    def public_url(self, bucket: str, key: str) -> str:
        """Make an object world-readable and return its public URL."""

    def signed_url(self, bucket: str, key: str, ttl_seconds: int) -> str:
        """Return a time-limited read URL for a key."""

    def get(self, bucket: str, key: str) -> bytes:
        """Return the bytes stored under a key."""

    def check_bucket(self, bucket: str) -> None:
        """Raise when a bucket is unreachable."""


@dataclass
class StorageGateway:
    """Uploads, signs and reads objects in the private and public buckets."""

    store: ObjectStore
    private_bucket: str
    public_bucket: str
    signed_url_ttl_seconds: int = SIGNED_URL_TTL_SECONDS

    def upload(
        self, bucket: str, key: str, data: bytes, content_type: str
    ) -> StorageRef:
        """Upload bytes; objects in the public bucket also get a public URL."""
        try:
            self.store.put(bucket, key, data, content_type)
            public_url = (
                self.store.public_url(bucket, key)
                if bucket == self.public_bucket
                else None
            )
        except Exception as exc:
            logger.exception(
                "Object upload failed", extra={"bucket": bucket, "key": key}
            )
            raise StorageWriteError(f"Upload of {bucket}/{key} failed") from exc
        return StorageRef(bucket=bucket, key=key, public_url=public_url)

    def signed_read_url(
        self, bucket: str, key: str, ttl_seconds: int | None = None
    ) -> str:
        """Mint a signed read URL for one key."""
        ttl = (
            self.signed_url_ttl_seconds if ttl_seconds is None else ttl_seconds
        )
        try:
            url = self.store.signed_url(bucket, key, ttl)
        except Exception as exc:
            raise StorageReadError(f"Cannot sign {bucket}/{key}") from exc
        if not url:
            raise StorageReadError(f"No signed URL returned for {bucket}/{key}")
        return url

    def document_url(self, key: str) -> str:
        return self.signed_read_url(self.private_bucket, key)

    def download(self, bucket: str, key: str) -> bytes:
        try:
            return self.store.get(bucket, key)
        except Exception as exc:
            raise StorageReadError(f"Cannot read {bucket}/{key}") from exc

    def check(self) -> dict[str, bool]:
        """Return reachability per bucket."""
        results: dict[str, bool] = {}
        for bucket in (self.private_bucket, self.public_bucket):
            try:
                self.store.check_bucket(bucket)
            except Exception:
                logger.exception("Bucket check failed", extra={"bucket": bucket})
                results[bucket] = False
            else:
                results[bucket] = True
        return results
