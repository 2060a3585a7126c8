"""
Typed attribute access for products.

Filters address product fields by dotted path ("features.wifiEnabled").
Instead of walking the object generically, every readable path is listed in
AttributePath and bound to an explicit getter. Paths outside the enumeration
resolve to None, which the filter engine treats as "no value".
"""

from enum import Enum
from typing import Callable, Dict, Optional

from filtering.models import AttributeValue, Product


class AttributePath(str, Enum):
    """Every product path a filter may reference."""
    ID = "id"
    BRAND = "brand"
    COLOR = "color"
    PRICE_TIER = "priceTier"
    PRICE = "price"
    PRICE_AMOUNT = "price.displayPrice.amount"
    PRICE_CURRENCY = "price.displayPrice.currency"
    DESCRIPTION = "description"

    CAPACITY = "specifications.capacity"
    ENERGY_RATING = "specifications.energyRating"
    NOISE_LEVEL = "specifications.noiseLevel"
    SPIN_SPEED = "specifications.spinSpeed"
    WIDTH = "specifications.width"
    HEIGHT = "specifications.height"
    DEPTH = "specifications.depth"
    WEIGHT = "specifications.weight"

    WIFI_ENABLED = "features.wifiEnabled"
    SMART_DIAGNOSIS = "features.smartDiagnosis"
    VOICE_CONTROL = "features.voiceControl"
    ENERGY_STAR_CERTIFIED = "features.energyStarCertified"
    WATER_SENSE_APPROVED = "features.waterSenseApproved"
    STEAM_CLEANING = "features.steamCleaning"
    ALLERGEN_CYCLE = "features.allergenCycle"
    QUICK_WASH = "features.quickWash"
    SANITIZE_CYCLE = "features.sanitizeCycle"
    STAINLESS_STEEL_DRUM = "features.stainlessSteelDrum"
    DIRECT_DRIVE_MOTOR = "features.directDriveMotor"


_GETTERS: Dict[AttributePath, Callable[[Product], AttributeValue]] = {
    AttributePath.ID: lambda p: p.id,
    AttributePath.BRAND: lambda p: p.brand.value,
    AttributePath.COLOR: lambda p: p.color.value,
    AttributePath.PRICE_TIER: lambda p: p.price_tier.value,
    # The schema's "price" range is the display amount
    AttributePath.PRICE: lambda p: p.price.display_price.amount,
    AttributePath.PRICE_AMOUNT: lambda p: p.price.display_price.amount,
    AttributePath.PRICE_CURRENCY: lambda p: p.price.display_price.currency,
    AttributePath.DESCRIPTION: lambda p: p.description,

    AttributePath.CAPACITY: lambda p: p.specifications.capacity,
    AttributePath.ENERGY_RATING: lambda p: p.specifications.energy_rating.value,
    AttributePath.NOISE_LEVEL: lambda p: p.specifications.noise_level,
    AttributePath.SPIN_SPEED: lambda p: p.specifications.spin_speed,
    AttributePath.WIDTH: lambda p: p.specifications.width,
    AttributePath.HEIGHT: lambda p: p.specifications.height,
    AttributePath.DEPTH: lambda p: p.specifications.depth,
    AttributePath.WEIGHT: lambda p: p.specifications.weight,

    AttributePath.WIFI_ENABLED: lambda p: p.features.wifi_enabled,
    AttributePath.SMART_DIAGNOSIS: lambda p: p.features.smart_diagnosis,
    AttributePath.VOICE_CONTROL: lambda p: p.features.voice_control,
    AttributePath.ENERGY_STAR_CERTIFIED: lambda p: p.features.energy_star_certified,
    AttributePath.WATER_SENSE_APPROVED: lambda p: p.features.water_sense_approved,
    AttributePath.STEAM_CLEANING: lambda p: p.features.steam_cleaning,
    AttributePath.ALLERGEN_CYCLE: lambda p: p.features.allergen_cycle,
    AttributePath.QUICK_WASH: lambda p: p.features.quick_wash,
    AttributePath.SANITIZE_CYCLE: lambda p: p.features.sanitize_cycle,
    AttributePath.STAINLESS_STEEL_DRUM: lambda p: p.features.stainless_steel_drum,
    AttributePath.DIRECT_DRIVE_MOTOR: lambda p: p.features.direct_drive_motor,
}


def known_path(path: str) -> Optional[AttributePath]:
    """Return the AttributePath for a dotted path, or None if it is not readable."""
    try:
        return AttributePath(path)
    except ValueError:
        return None


def resolve_attribute(product: Product, path: str) -> AttributeValue:
    """Read a product value by dotted path. Unknown paths resolve to None."""
    key = known_path(path)
    if key is None:
        return None
    return _GETTERS[key](product)


def format_attribute_value(value: AttributeValue) -> Optional[str]:
    """String form used for filter selections ("true", "HOMEPRO", ...)."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
