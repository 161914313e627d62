from .enums import CampaignStatus, PromotionStatus, SocialPlatform, PublicationStatus, MediaKind
from .organizations import Organization
from .stores import Store, StoreSettings
from .campaigns import Campaign
from .promotions import Promotion
from .social_connections import SocialConnection
from .publication_history import PublicationHistory
from .google_merchant_accounts import GoogleMerchantAccount

__all__ = [
    "CampaignStatus",
    "PromotionStatus",
    "SocialPlatform",
    "PublicationStatus",
    "MediaKind",
    "Organization",
    "Store",
    "StoreSettings",
    "Campaign",
    "Promotion",
    "SocialConnection",
    "PublicationHistory",
    "GoogleMerchantAccount",
]
