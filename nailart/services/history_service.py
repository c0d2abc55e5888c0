"""
Thumbnail history stored in the Supabase thumbnails table.
"""

import logging
from typing import List, Optional

from ..config import Config
from ..models.user import Thumbnail


async def get_history(client, user_id: str, access_token: Optional[str] = None) -> List[Thumbnail]:
    """
    Retrieves all thumbnails of a user, newest first.

    Args:
        client: Supabase client
        user_id: The user's ID
        access_token: The user's access token (row level security)

    Returns:
        Thumbnails ordered by created_at descending
    """
    rows = await client.select(
        Config.THUMBNAILS_TABLE,
        filters={"user_id": user_id},
        order="created_at",
        descending=True,
        access_token=access_token,
    )
    thumbnails = [Thumbnail.model_validate(row) for row in rows or []]
    thumbnails.sort(key=lambda t: t.created_at, reverse=True)
    return thumbnails


async def add_thumbnail(client, user_id: str, url: str, prompt: str,
                        access_token: Optional[str] = None) -> Thumbnail:
    """Records a generated thumbnail and returns the stored row."""
    row = await client.insert(
        Config.THUMBNAILS_TABLE,
        [{"user_id": user_id, "url": url, "prompt": prompt}],
        single=True,
        access_token=access_token,
    )
    thumbnail = Thumbnail.model_validate(row)
    logging.info(f"Stored thumbnail {thumbnail.id} for user {user_id}")
    return thumbnail
