#!/usr/bin/env python
"""Write the seeded washing machine catalog to a JSON file.

Point PRODUCTS_PATH at the output to serve a fixed catalog instead of
generating one at startup.

Usage:
    PYTHONPATH=src python scripts/generate_products.py --out data/products.json --seed 42
"""

import argparse
import sys
from collections import Counter
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))

from dotenv import load_dotenv
load_dotenv(ROOT / ".env")

from catalog.seed import DEFAULT_SEED, generate_products
from catalog.store import write_products
from core.logging import configure_logging, get_logger

logger = get_logger("generate_products")


def main():
    parser = argparse.ArgumentParser(description="Generate the demo product catalog")
    parser.add_argument("--out", type=Path, default=ROOT / "data" / "products.json",
                        help="Output JSON file (default: data/products.json)")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED,
                        help=f"Random seed (default: {DEFAULT_SEED})")
    args = parser.parse_args()

    configure_logging(json_logs=False, log_level="INFO")

    products = generate_products(args.seed)
    write_products(products, args.out)

    tiers = Counter(p.price_tier.value for p in products)
    brands = Counter(p.brand.value for p in products)
    logger.info(
        "Catalog written",
        path=str(args.out),
        products=len(products),
        seed=args.seed,
        tiers=dict(tiers),
        brands=dict(brands),
    )


if __name__ == "__main__":
    main()
