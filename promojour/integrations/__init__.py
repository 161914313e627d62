"""
Integrations package initialization.
Exports the platform adapters and outbound API clients.
"""
from .base import MediaRef, PublishError, PublishResult, SocialPublisher
from .http import GraphAPIClient, HttpResponse, JsonHttpClient
from .instagram import InstagramPublisher
from .facebook import FacebookPublisher
from .platforms import PublisherRegistry
from .google_merchant import GoogleMerchantClient, GoogleMerchantError
from .brevo import BrevoClient, BrevoError

__all__ = [
    "MediaRef",
    "PublishError",
    "PublishResult",
    "SocialPublisher",
    "GraphAPIClient",
    "HttpResponse",
    "JsonHttpClient",
    "InstagramPublisher",
    "FacebookPublisher",
    "PublisherRegistry",
    "GoogleMerchantClient",
    "GoogleMerchantError",
    "BrevoClient",
    "BrevoError",
]
