# app/api/deps.py
from app.core.config import settings
from app.services.enrichment import EnrichmentGateway


def get_enrichment_gateway() -> EnrichmentGateway:
    """Gateway to the user and product services, built from settings."""
    return EnrichmentGateway(
        settings.USER_SERVICE_URL,
        settings.PRODUCT_SERVICE_URL,
        timeout=settings.ENRICHMENT_TIMEOUT_SECONDS,
    )
