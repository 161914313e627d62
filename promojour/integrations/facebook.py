"""
Facebook Page publishing through the Graph API.

Reels use the resumable ``video_reels`` session: start -> upload bytes ->
finish. There is no status polling; the finish call makes the Reel live.
Photo posts are a single ``/photos`` call.
"""
import json

from promojour.models.db.enums import SocialPlatform
from promojour.utils import get_logger
from .base import PublishError, PublishResult, SocialPublisher
from .http import GraphAPIClient

logger = get_logger(__name__)


class FacebookPublisher(SocialPublisher):
    """Facebook Page Reels / photo publisher."""

    platform = SocialPlatform.FACEBOOK

    def __init__(self, client: GraphAPIClient):
        self.client = client
        self.logger = get_logger(f"integration.{self.platform.value}")

    async def publish_reel(self, account_id: str, access_token: str, video_url: str, caption: str) -> PublishResult:
        endpoint = f"{account_id}/video_reels"

        start = await self.client.post(endpoint, params={"upload_phase": "start", "access_token": access_token})
        video_id = start.data.get("video_id")
        upload_url = start.data.get("upload_url")
        if not start.ok or not video_id or not upload_url:
            raise PublishError(
                f"Failed to initiate Facebook Reel upload: {json.dumps(start.data)}",
                stage="create_container",
                payload=start.data,
            )
        self.logger.info("Facebook Reel upload session started", video_id=video_id)

        try:
            content = await self.client.download(video_url)
        except Exception as e:
            raise PublishError(f"Failed to download video: {e}", stage="upload") from e

        uploaded = await self.client.upload(
            upload_url,
            content,
            headers={
                "Authorization": f"OAuth {access_token}",
                "offset": "0",
                "file_size": str(len(content)),
            },
        )
        if not uploaded.ok:
            raise PublishError(
                f"Failed to upload video to Facebook: HTTP {uploaded.status} {uploaded.text[:200]}",
                stage="upload",
                payload=uploaded.data,
            )

        finish = await self.client.post(
            endpoint,
            params={
                "upload_phase": "finish",
                "video_id": video_id,
                "video_state": "PUBLISHED",
                "description": caption,
                "access_token": access_token,
            },
        )
        if not finish.ok:
            raise PublishError(
                f"Failed to finalize Facebook Reel: {json.dumps(finish.data)}",
                stage="publish",
                payload=finish.data,
            )
        self.logger.info("Facebook Reel published", video_id=video_id)
        post_id = finish.data.get("id") or finish.data.get("post_id") or video_id
        return PublishResult(post_id=str(post_id), raw={**finish.data, "video_id": video_id})

    async def publish_image(self, account_id: str, access_token: str, image_url: str, caption: str) -> PublishResult:
        response = await self.client.post(
            f"{account_id}/photos",
            params={"url": image_url, "caption": caption, "access_token": access_token},
        )
        if not response.ok:
            raise PublishError(
                f"Failed to publish Facebook photo: {json.dumps(response.data)}",
                stage="publish",
                payload=response.data,
            )
        post_id = response.data.get("post_id") or response.data.get("id")
        self.logger.info("Facebook photo published", post_id=post_id)
        return PublishResult(post_id=str(post_id) if post_id else None, raw=response.data)


__all__ = ["FacebookPublisher"]
