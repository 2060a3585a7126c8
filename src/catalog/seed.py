"""
Deterministic demo catalog of washing machines.

The tier and brand mix is fixed (50 products: 15 budget, 20 mid-range,
12 premium, 3 luxury). Everything else is drawn from tier-dependent ranges
with a seeded random.Random, so the same seed always yields the same catalog.
"""

import random
from typing import Dict, List, Optional, Tuple

from filtering.models import (
    Brand,
    Color,
    EnergyRating,
    Features,
    Money,
    Price,
    PriceTier,
    Product,
    Specifications,
)

PRICE_TIER_TARGETS: Dict[PriceTier, int] = {
    PriceTier.BUDGET: 15,
    PriceTier.MID_RANGE: 20,
    PriceTier.PREMIUM: 12,
    PriceTier.LUXURY: 3,
}

BRAND_TARGETS: Dict[Brand, int] = {
    Brand.KITCHENTECH: 12,
    Brand.HOMEPRO: 13,
    Brand.APPLIANCE_PLUS: 10,
    Brand.COOKMASTER: 10,
    Brand.HOMEMATE: 5,
}

BRAND_NAMES: Dict[Brand, str] = {
    Brand.KITCHENTECH: "KitchenTech",
    Brand.HOMEPRO: "HomePro",
    Brand.APPLIANCE_PLUS: "Appliance Plus",
    Brand.COOKMASTER: "CookMaster",
    Brand.HOMEMATE: "HomeMate",
}

# tier -> (price range, capacity range, energy ratings, noise range, spin speeds, feature chance)
_TIER_PROFILES = {
    PriceTier.BUDGET: (
        (330, 999), (3.5, 4.2),
        (EnergyRating.B, EnergyRating.A),
        (65, 72), (1000, 1100, 1200), 0.2,
    ),
    PriceTier.MID_RANGE: (
        (1000, 2999), (4.0, 4.8),
        (EnergyRating.A, EnergyRating.A_PLUS),
        (58, 64), (1200, 1300, 1400), 0.5,
    ),
    PriceTier.PREMIUM: (
        (3000, 4999), (4.5, 5.5),
        (EnergyRating.A_PLUS, EnergyRating.A_PLUS_PLUS),
        (52, 57), (1400, 1500, 1600), 0.8,
    ),
    PriceTier.LUXURY: (
        (5000, 7500), (5.5, 6.2),
        (EnergyRating.A_PLUS_PLUS, EnergyRating.A_PLUS_PLUS_PLUS),
        (45, 51), (1600, 1700, 1800), 0.95,
    ),
}

_TIER_TAGLINES = {
    PriceTier.BUDGET: "Reliable and affordable",
    PriceTier.MID_RANGE: "Feature-rich and dependable",
    PriceTier.PREMIUM: "Premium quality with advanced features",
    PriceTier.LUXURY: "Top-of-the-line luxury appliance",
}

DEFAULT_SEED = 42


def _plan(rng: random.Random) -> List[Tuple[Brand, PriceTier]]:
    """Pair each tier slot with a brand that is still under its target."""
    counts = {brand: 0 for brand in BRAND_TARGETS}
    plan = []
    for tier, total in PRICE_TIER_TARGETS.items():
        for _ in range(total):
            open_brands = [b for b in BRAND_TARGETS if counts[b] < BRAND_TARGETS[b]]
            brand = rng.choice(open_brands or list(BRAND_TARGETS))
            counts[brand] += 1
            plan.append((brand, tier))
    return plan


def _features(rng: random.Random, chance: float) -> Features:
    return Features(
        wifi_enabled=rng.random() < chance,
        smart_diagnosis=rng.random() < chance,
        voice_control=rng.random() < chance * 0.7,
        energy_star_certified=rng.random() < chance + 0.2,
        water_sense_approved=rng.random() < chance,
        steam_cleaning=rng.random() < chance,
        allergen_cycle=rng.random() < chance,
        quick_wash=rng.random() < chance + 0.3,
        sanitize_cycle=rng.random() < chance,
        stainless_steel_drum=rng.random() < chance + 0.1,
        direct_drive_motor=rng.random() < chance,
    )


def describe(brand: Brand, tier: PriceTier, capacity: float, features: Features) -> str:
    parts = [f"{_TIER_TAGLINES[tier]} front-load washer from {BRAND_NAMES[brand]}."]

    if capacity >= 5.0:
        parts.append(f"Extra-large {capacity} cu ft capacity perfect for families.")
    elif capacity >= 4.5:
        parts.append(f"Spacious {capacity} cu ft capacity for everyday loads.")
    else:
        parts.append(f"Compact {capacity} cu ft capacity ideal for apartments.")

    highlights = [
        label for enabled, label in (
            (features.wifi_enabled, "WiFi connectivity"),
            (features.steam_cleaning, "steam cleaning"),
            (features.allergen_cycle, "allergen removal"),
            (features.sanitize_cycle, "sanitize cycle"),
        ) if enabled
    ]
    if highlights:
        parts.append(f"Features {', '.join(highlights)} for superior cleaning.")

    if features.stainless_steel_drum and features.direct_drive_motor:
        parts.append("Built with stainless steel drum and direct drive motor for durability.")
    elif features.stainless_steel_drum:
        parts.append("Durable stainless steel drum construction.")

    return " ".join(parts)


def generate_products(seed: Optional[int] = DEFAULT_SEED) -> List[Product]:
    """Generate the demo catalog. Ids run WM_0001, WM_0002, ... in plan order."""
    rng = random.Random(seed)
    products = []

    for index, (brand, tier) in enumerate(_plan(rng), start=1):
        price_range, capacity_range, ratings, noise_range, spins, chance = _TIER_PROFILES[tier]
        capacity = round(rng.uniform(*capacity_range), 1)
        features = _features(rng, chance)

        products.append(Product(
            id=f"WM_{index:04d}",
            brand=brand,
            color=rng.choice(list(Color)),
            price=Price(display_price=Money(amount=rng.randint(*price_range))),
            price_tier=tier,
            specifications=Specifications(
                capacity=capacity,
                energy_rating=rng.choice(ratings),
                noise_level=rng.randint(*noise_range),
                spin_speed=rng.choice(spins),
                width=rng.randint(27, 30),
                height=rng.randint(38, 42),
                depth=rng.randint(30, 34),
                weight=rng.randint(180, 250),
            ),
            features=features,
            description=describe(brand, tier, capacity, features),
        ))

    return products
