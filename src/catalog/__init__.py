"""Product catalog: seeded demo data and the in-memory store."""

from catalog.seed import generate_products
from catalog.store import ProductCatalog, get_catalog, load_catalog

__all__ = ["ProductCatalog", "generate_products", "get_catalog", "load_catalog"]
