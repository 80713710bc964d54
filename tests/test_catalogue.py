import json

import pytest

from catalogue import CatalogueStore, product_summaries
from conftest import SAMPLE_PRODUCTS
from errors import CatalogueUnavailable


def test_load_parses_products(catalogue):
    products = catalogue.load()
    assert len(products) == len(SAMPLE_PRODUCTS)
    assert products[0].id == "1"
    assert products[0].category == "Cleanser"
    assert products[0].record()["image"] == "img/1.jpg"


def test_load_is_memoized(catalogue, catalogue_file):
    first = catalogue.load()
    catalogue_file.unlink()
    assert catalogue.load() is first
    assert catalogue.generation == 1


def test_reload_fetches_again(catalogue, catalogue_file):
    catalogue.load()
    catalogue_file.write_text(json.dumps({"products": [{"id": "z", "name": "Only"}]}), encoding="utf-8")
    products = catalogue.reload()
    assert [p.id for p in products] == ["z"]
    assert catalogue.generation == 2


def test_missing_file_is_unavailable(tmp_path):
    with pytest.raises(CatalogueUnavailable):
        CatalogueStore(str(tmp_path / "nope.json")).load()


@pytest.mark.parametrize("body", [
    b"not json",
    json.dumps({"items": []}).encode(),
    json.dumps([1, 2]).encode(),
    b"\xff{\"products\": []}",
])
def test_malformed_document_is_unavailable(tmp_path, body):
    path = tmp_path / "products.json"
    path.write_bytes(body)
    store = CatalogueStore(str(path))
    with pytest.raises(CatalogueUnavailable):
        store.load()
    assert not store.loaded


def test_missing_fields_become_empty_and_ids_are_derived(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(json.dumps({"products": [
        {"sku": "A-1", "name": "Toner", "brand": None},
        {"name": "Mystery"},
        "garbage",
    ]}), encoding="utf-8")
    products = CatalogueStore(str(path)).load()

    assert [p.id for p in products] == ["A-1", "Mystery-1"]
    assert products[0].brand == ""
    assert products[1].category == ""


def test_find_by_id_sku_and_name(catalogue):
    assert catalogue.find("2").name == "Daily Moisturizer"
    assert catalogue.find("SKU-11").id == "11"
    assert catalogue.find("missing") is None
    assert catalogue.find_by_name("vitamin c SERUM").id == "3"


def test_categories_are_distinct_and_sorted(catalogue):
    categories = catalogue.categories()
    assert categories[0] == "Cleanser"
    assert categories.count("haircare") == 1
    assert categories == sorted(categories, key=str.casefold)


def test_filter_by_category_and_query(catalogue):
    assert catalogue.filter() == []
    assert [p.id for p in catalogue.filter(category="HAIRCARE")] == ["6", "7", "8"]
    assert [p.id for p in catalogue.filter(category="haircare", query="mask")] == ["8"]
    assert [p.id for p in catalogue.filter(query="kerastase")] == ["6", "7"]


def test_product_summaries_are_compact(catalogue):
    summary = product_summaries(catalogue.load())[0]
    assert set(summary) == {"name", "brand", "category", "description"}


def test_http_source(requests_mock):
    requests_mock.get("https://cdn.test/products.json", json={"products": SAMPLE_PRODUCTS[:2]})
    store = CatalogueStore("https://cdn.test/products.json")
    assert [p.id for p in store.load()] == ["1", "2"]


def test_http_failure_is_unavailable(requests_mock):
    requests_mock.get("https://cdn.test/products.json", status_code=404)
    with pytest.raises(CatalogueUnavailable):
        CatalogueStore("https://cdn.test/products.json").load()
