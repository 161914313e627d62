"""PromoJour backend package.

Campaign distribution, social publishing and Google Merchant sync services
exposed through a FastAPI application (see ``promojour.main``).
"""

__all__: list[str] = []
