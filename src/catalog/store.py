"""
In-memory product catalog.

Products come from a JSON file (PRODUCTS_PATH) when configured, otherwise
from the seeded generator. The catalog is read-only after load.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pydantic import TypeAdapter

from catalog.seed import generate_products
from config.settings import get_settings
from core.logging import get_logger
from filtering.filter_engine import apply_filters
from filtering.models import AppliedFilterState, AttributeDescriptor, Product
from filtering.schema import build_available_filters

logger = get_logger(__name__)

_PRODUCT_LIST = TypeAdapter(List[Product])


class ProductCatalog:
    """Ordered, immutable product collection with lookup by id."""

    def __init__(self, products: Sequence[Product]):
        self._products = tuple(products)
        self._by_id: Dict[str, Product] = {p.id: p for p in self._products}

    def __len__(self) -> int:
        return len(self._products)

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    def get(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def filter(self, state: AppliedFilterState) -> List[Product]:
        return apply_filters(self._products, state)

    def available_filters(self) -> List[AttributeDescriptor]:
        return build_available_filters(self._products)


def read_products(path: Path) -> List[Product]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    # Accept either a bare list or {"products": [...]}
    if isinstance(data, dict):
        data = data.get("products", [])
    return _PRODUCT_LIST.validate_python(data)


def write_products(products: Sequence[Product], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = _PRODUCT_LIST.dump_python(list(products), by_alias=True, mode="json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def load_catalog(path: Optional[Path] = None, seed: int = 42) -> ProductCatalog:
    if path is not None:
        products = read_products(path)
        logger.info("Catalog loaded from file", path=str(path), products=len(products))
    else:
        products = generate_products(seed)
        logger.info("Catalog generated", seed=seed, products=len(products))
    return ProductCatalog(products)


@lru_cache()
def get_catalog() -> ProductCatalog:
    """Get the catalog for the configured source (cached)."""
    settings = get_settings()
    return load_catalog(settings.products_path, settings.catalog_seed)
