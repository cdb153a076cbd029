"""Pricing resolver factory.

Provides get_pricing() / set_pricing() to swap implementations:
- HttpCatalogPricing when CATALOG_SERVICE_URL is configured
- FakeCatalog otherwise (development and testing)
"""

from checkout.pricing.fake_adapter import FakeCatalog
from checkout.pricing.http_adapter import HttpCatalogPricing
from checkout.pricing.port import PricingResolver
from checkout.settings import settings

_current_pricing: PricingResolver | None = None


def get_pricing() -> PricingResolver:
    """Return the current pricing resolver."""
    global _current_pricing
    if _current_pricing is None:
        if settings.catalog_service_url:
            _current_pricing = HttpCatalogPricing(
                settings.catalog_service_url,
                timeout=settings.upstream_timeout_seconds,
            )
        else:
            _current_pricing = FakeCatalog()
    return _current_pricing


def set_pricing(pricing: PricingResolver) -> None:
    """Override the active pricing resolver (useful for tests)."""
    global _current_pricing
    _current_pricing = pricing


def reset_pricing() -> None:
    """Reset to the configured default."""
    global _current_pricing
    _current_pricing = None
