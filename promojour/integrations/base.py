"""Shared publishing contract for social platform adapters.

Each platform runs its own state machine (Instagram polls a media container,
Facebook walks an upload session) but every adapter answers the same call:
``publish(media, caption, account_id=..., access_token=...)`` returning a
``PublishResult`` or raising ``PublishError``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from promojour.models.db.enums import MediaKind, SocialPlatform


@dataclass(frozen=True)
class MediaRef:
    kind: MediaKind
    url: str


@dataclass
class PublishResult:
    post_id: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict)


class PublishError(Exception):
    """Terminal failure of a publish attempt. Never retried in-invocation."""

    def __init__(self, message: str, *, stage: str, payload: Any = None):
        super().__init__(message)
        self.stage = stage
        self.payload = payload


class SocialPublisher(ABC):
    platform: SocialPlatform

    async def publish(
        self,
        media: MediaRef,
        caption: str,
        *,
        account_id: str,
        access_token: str,
    ) -> PublishResult:
        if media.kind == MediaKind.VIDEO:
            return await self.publish_reel(account_id, access_token, media.url, caption)
        if media.kind == MediaKind.IMAGE:
            return await self.publish_image(account_id, access_token, media.url, caption)
        raise PublishError(f"Unsupported media kind: {media.kind}", stage="validate")

    @abstractmethod
    async def publish_reel(self, account_id: str, access_token: str, video_url: str, caption: str) -> PublishResult:
        """Publish a short vertical video."""

    @abstractmethod
    async def publish_image(self, account_id: str, access_token: str, image_url: str, caption: str) -> PublishResult:
        """Publish a single image post."""


__all__ = ["MediaRef", "PublishResult", "PublishError", "SocialPublisher"]
