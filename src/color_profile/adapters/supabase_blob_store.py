"""Supabase Storage blob store for uploaded selfies."""

import asyncio
from dataclasses import dataclass

from supabase import Client

from color_profile.services.sessions import BlobStore


@dataclass
class SupabaseBlobStore(BlobStore):
    """Blob store backed by a Supabase Storage bucket."""

    client: Client
    bucket: str

    async def get(self, location: str) -> bytes:
        """Download an object from the bucket."""
        data = await asyncio.to_thread(
            self.client.storage.from_(self.bucket).download, location
        )
        if not data:
            raise RuntimeError(f"Blob {location} is empty or missing")
        return data

    async def delete(self, location: str) -> None:
        """Remove an object from the bucket."""
        await asyncio.to_thread(
            self.client.storage.from_(self.bucket).remove, [location]
        )
