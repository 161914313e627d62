"""
Instagram publishing through the Graph API (business accounts).

Reels follow CREATE_CONTAINER -> POLL_PROCESSING -> PUBLISH. Image posts
skip polling: the container is published as soon as it exists.
"""
import asyncio
import json
from typing import Any, Dict, Optional

from promojour import config
from promojour.models.db.enums import SocialPlatform
from promojour.utils import get_logger
from .base import PublishError, PublishResult, SocialPublisher
from .http import GraphAPIClient

logger = get_logger(__name__)

STATUS_FINISHED = "FINISHED"
STATUS_ERROR = "ERROR"


class InstagramPublisher(SocialPublisher):
    """Instagram Reels / image publisher."""

    platform = SocialPlatform.INSTAGRAM

    def __init__(
        self,
        client: GraphAPIClient,
        *,
        poll_interval: Optional[float] = None,
        max_poll_attempts: Optional[int] = None,
    ):
        self.client = client
        self.poll_interval = float(
            poll_interval if poll_interval is not None else config.INSTAGRAM_POLL_SETTINGS["interval_seconds"]
        )
        self.max_poll_attempts = int(
            max_poll_attempts if max_poll_attempts is not None else config.INSTAGRAM_POLL_SETTINGS["max_attempts"]
        )
        self.logger = get_logger(f"integration.{self.platform.value}")

    async def _create_container(self, ig_user_id: str, params: Dict[str, Any], label: str) -> str:
        response = await self.client.post(f"{ig_user_id}/media", params=params)
        container_id = response.data.get("id")
        if not response.ok or not container_id:
            raise PublishError(
                f"Failed to create Instagram {label} container: {json.dumps(response.data)}",
                stage="create_container",
                payload=response.data,
            )
        self.logger.info("Instagram container created", container_id=container_id, media=label)
        return str(container_id)

    async def _wait_until_finished(self, container_id: str, access_token: str) -> None:
        for attempt in range(1, self.max_poll_attempts + 1):
            await asyncio.sleep(self.poll_interval)
            response = await self.client.get(
                container_id,
                params={"fields": "status_code", "access_token": access_token},
            )
            status_code = response.data.get("status_code")
            self.logger.debug("Instagram processing status", container_id=container_id, attempt=attempt, status_code=status_code)
            if status_code == STATUS_FINISHED:
                return
            if status_code == STATUS_ERROR:
                raise PublishError(
                    "Instagram video processing failed",
                    stage="poll_processing",
                    payload=response.data,
                )
        raise PublishError("Instagram video processing timeout", stage="poll_processing")

    async def _publish_container(self, ig_user_id: str, container_id: str, access_token: str, label: str) -> PublishResult:
        response = await self.client.post(
            f"{ig_user_id}/media_publish",
            params={"creation_id": container_id, "access_token": access_token},
        )
        if not response.ok:
            raise PublishError(
                f"Failed to publish Instagram {label}: {json.dumps(response.data)}",
                stage="publish",
                payload=response.data,
            )
        post_id = response.data.get("id")
        self.logger.info("Instagram media published", post_id=post_id, media=label)
        return PublishResult(post_id=str(post_id) if post_id else None, raw=response.data)

    async def publish_reel(self, account_id: str, access_token: str, video_url: str, caption: str) -> PublishResult:
        container_id = await self._create_container(
            account_id,
            {
                "media_type": "REELS",
                "video_url": video_url,
                "caption": caption,
                "access_token": access_token,
            },
            "Reel",
        )
        await self._wait_until_finished(container_id, access_token)
        return await self._publish_container(account_id, container_id, access_token, "Reel")

    async def publish_image(self, account_id: str, access_token: str, image_url: str, caption: str) -> PublishResult:
        container_id = await self._create_container(
            account_id,
            {"image_url": image_url, "caption": caption, "access_token": access_token},
            "post",
        )
        return await self._publish_container(account_id, container_id, access_token, "post")


__all__ = ["InstagramPublisher"]
