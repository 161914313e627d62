"""
Pydantic schemas for Google Merchant Center sync and listings.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class MerchantSyncRequest(BaseModel):
    store_id: str = Field(min_length=1)


class ProductSyncResult(BaseModel):
    promotion_id: str
    success: bool
    error: Optional[str] = None


class MerchantSyncResponse(BaseModel):
    message: str
    count: int = 0
    results: List[ProductSyncResult] = Field(default_factory=list)


class MerchantAccountRead(BaseModel):
    id: str
    name: str
    website_url: Optional[str] = None


class MerchantAccountsResponse(BaseModel):
    accounts: List[MerchantAccountRead] = Field(default_factory=list)
    message: str


class MerchantProductRead(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    image_link: Optional[str] = None
    price: Optional[Dict[str, Any]] = None
    availability: Optional[str] = None


class MerchantProductsResponse(BaseModel):
    success: bool = True
    merchant_id: str
    count: int
    products: List[MerchantProductRead] = Field(default_factory=list)
