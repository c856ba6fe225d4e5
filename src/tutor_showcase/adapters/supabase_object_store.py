"""Supabase Storage implementation of the object store."""

from dataclasses import dataclass

from supabase import Client

from tutor_showcase.services.storage import ObjectStore


@dataclass
class SupabaseObjectStore(ObjectStore):
    """Object store backed by Supabase Storage buckets.

    Public access is a bucket-level setting in Supabase, so the public-images
    bucket must be created as public; ``public_url`` resolves the object URL.
    """

    client: Client

    def put(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        self.client.storage.from_(bucket).upload(
            path=key,
            file=data,
            file_options={"content-type": content_type, "upsert": "false"},
        )

    def public_url(self, bucket: str, key: str) -> str:
        return self.client.storage.from_(bucket).get_public_url(key)

    def signed_url(self, bucket: str, key: str, ttl_seconds: int) -> str:
        response = self.client.storage.from_(bucket).create_signed_url(
            key, ttl_seconds
        )
        url = response.get("signedURL") or response.get("signedUrl")
        if not url:
            raise RuntimeError(f"Supabase returned no signed URL for {bucket}/{key}")
        return url

    def get(self, bucket: str, key: str) -> bytes:
        return self.client.storage.from_(bucket).download(key)

    def check_bucket(self, bucket: str) -> None:
        self.client.storage.get_bucket(bucket)
