from .errors import ConfigIncompleteError, ConfigNotFoundError, InvalidRequestError, PricingError
from .models import PricingBreakdown, PricingConfig, ShipmentRequest
from .calculator import calculate
from .rounding import round_amount
from .tiers import classify_truck_tier, classify_weight_tier

__all__ = [
    "calculate", "round_amount", "classify_truck_tier", "classify_weight_tier",
    "PricingConfig", "ShipmentRequest", "PricingBreakdown",
    "PricingError", "ConfigIncompleteError", "InvalidRequestError", "ConfigNotFoundError",
]
