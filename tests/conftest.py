import json

import pytest

from catalogue import CatalogueStore
from session_store import InMemoryStateStore

RELAY_URL = "https://relay.test/"

SAMPLE_PRODUCTS = [
    {"id": 1, "brand": "CeraVe", "name": "Gentle Foaming Cleanser", "category": "Cleanser",
     "description": "Removes oil and dirt without stripping.", "image": "img/1.jpg"},
    {"id": 2, "brand": "La Roche-Posay", "name": "Daily Moisturizer", "category": "moisturizer",
     "description": "Hydrating face cream with ceramides.", "image": "img/2.jpg"},
    {"id": 3, "brand": "SkinCeuticals", "name": "Vitamin C Serum", "category": "skincare",
     "description": "Antioxidant serum for brighter-looking skin.", "image": "img/3.jpg"},
    {"id": 4, "brand": "L'Oreal Paris", "name": "Lash Mascara", "category": "makeup",
     "description": "Volumizing mascara.", "image": "img/4.jpg"},
    {"id": 5, "brand": "La Roche-Posay", "name": "Sheer Sunscreen SPF 50", "category": "Suncare",
     "description": "Broad spectrum sunscreen.", "image": "img/5.jpg"},
    {"id": 6, "brand": "Kerastase", "name": "Repair Shampoo", "category": "haircare",
     "description": "Nourishing shampoo for dry hair.", "image": "img/6.jpg"},
    {"id": 7, "brand": "Kerastase", "name": "Silk Conditioner", "category": "haircare",
     "description": "Detangles and softens.", "image": "img/7.jpg"},
    {"id": 8, "brand": "Redken", "name": "Deep Hair Mask", "category": "haircare",
     "description": "Intensive weekly treatment for dry hair.", "image": "img/8.jpg"},
    {"id": 9, "brand": "L'Oreal Paris", "name": "Strong Hold Hairspray", "category": "hair styling",
     "description": "Flexible hold that brushes out.", "image": "img/9.jpg"},
    {"id": 10, "brand": "YSL", "name": "Eau de Parfum", "category": "fragrance",
     "description": "Floral lavender scent.", "image": "img/10.jpg"},
    {"id": 11, "sku": "SKU-11", "brand": "Men Expert", "name": "Shave Foam", "category": "men's grooming",
     "description": "Cooling foam for a close shave.", "image": "img/11.jpg"},
]


@pytest.fixture
def catalogue_file(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(json.dumps({"products": SAMPLE_PRODUCTS}), encoding="utf-8")
    return path


@pytest.fixture
def catalogue(catalogue_file):
    return CatalogueStore(str(catalogue_file))


@pytest.fixture
def store():
    return InMemoryStateStore()
