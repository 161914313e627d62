from .base import ResponseBase, ErrorResponse
from .distribution import DistributionSummaryRead, DistributionRunResponse
from .publishing import PublishRequest, PlatformResult, PublishResponse
from .publication_history import PublicationHistoryRead, PublicationHistoryPage
from .merchant import (
    MerchantSyncRequest, ProductSyncResult, MerchantSyncResponse,
    MerchantAccountRead, MerchantAccountsResponse, MerchantProductRead, MerchantProductsResponse,
)
from .alerts import StoreAlertResult, AlertCheckResponse, ArchiveResponse

__all__ = [
    "ResponseBase",
    "ErrorResponse",
    "DistributionSummaryRead",
    "DistributionRunResponse",
    "PublishRequest",
    "PlatformResult",
    "PublishResponse",
    "PublicationHistoryRead",
    "PublicationHistoryPage",
    "MerchantSyncRequest",
    "ProductSyncResult",
    "MerchantSyncResponse",
    "MerchantAccountRead",
    "MerchantAccountsResponse",
    "MerchantProductRead",
    "MerchantProductsResponse",
    "StoreAlertResult",
    "AlertCheckResponse",
    "ArchiveResponse",
]
