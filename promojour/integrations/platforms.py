"""
Publisher registry: maps a social platform to its adapter.
"""
from typing import Dict, Optional

from promojour.models.db.enums import SocialPlatform
from promojour.utils import get_logger
from .base import PublishError, SocialPublisher
from .facebook import FacebookPublisher
from .http import GraphAPIClient
from .instagram import InstagramPublisher

logger = get_logger(__name__)


class PublisherRegistry:
    """Builds one adapter per supported platform around a shared Graph client."""

    def __init__(self, client: GraphAPIClient, *, poll_interval: Optional[float] = None):
        self.client = client
        self.publishers: Dict[SocialPlatform, SocialPublisher] = {
            SocialPlatform.FACEBOOK: FacebookPublisher(client),
            SocialPlatform.INSTAGRAM: InstagramPublisher(client, poll_interval=poll_interval),
        }

    def get(self, platform: SocialPlatform | str) -> SocialPublisher:
        try:
            key = SocialPlatform(platform)
        except ValueError:
            key = None
        publisher = self.publishers.get(key) if key else None
        if publisher is None:
            logger.error(
                "Unsupported platform",
                platform=str(platform),
                supported_platforms=[p.value for p in self.publishers],
            )
            raise PublishError(f"Unsupported platform: {platform}", stage="validate")
        return publisher


__all__ = ["PublisherRegistry"]
