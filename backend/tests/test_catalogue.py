from datetime import datetime, timezone
from decimal import Decimal

from zee_ordering.models.product import Product


def _seed(db):
    old = datetime(2024, 1, 1, tzinfo=timezone.utc)
    newer = datetime(2024, 6, 1, tzinfo=timezone.utc)
    db.add_all(
        [
            Product(sku="TEA-100", name="Assam Tea 100g", brand="Tetley", price=Decimal("120.00"),
                    stock=10, code="LEG-7", updated_at=old),
            Product(sku="COF-200", name="Filter Coffee 200g", brand="Bru", price=Decimal("240.50"),
                    stock=3, updated_at=newer),
            Product(sku="SUG-1", name="Sugar 1kg", brand="tetley", item_name="White crystal",
                    updated_at=old),
            Product(sku="SALT-1", name="Salt 1kg", brand=None, updated_at=old),
        ]
    )
    db.commit()


def test_list_products_returns_page_envelope(auth_client, db):
    _seed(db)
    res = auth_client.get("/api/products")
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 4
    assert body["page"] == 1
    assert body["pageSize"] == 50
    # most recently updated first
    assert body["items"][0]["sku"] == "COF-200"
    coffee = body["items"][0]
    assert Decimal(coffee["price"]) == Decimal("240.50")
    assert coffee["brand"] == "Bru"
    assert "imageUrl" in coffee and "minQty" in coffee


def test_search_without_matches_is_empty(auth_client, db):
    _seed(db)
    res = auth_client.get("/api/products", params={"q": "does-not-exist"})
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 0
    assert body["items"] == []


def test_search_matches_legacy_columns_case_insensitively(auth_client, db):
    _seed(db)
    by_code = auth_client.get("/api/products", params={"q": "leg-7"}).json()
    assert [p["sku"] for p in by_code["items"]] == ["TEA-100"]

    by_item_name = auth_client.get("/api/products", params={"q": "CRYSTAL"}).json()
    assert [p["sku"] for p in by_item_name["items"]] == ["SUG-1"]


def test_brand_filter_is_exact_and_case_insensitive(auth_client, db):
    _seed(db)
    body = auth_client.get("/api/products", params={"brand": "TETLEY"}).json()
    assert sorted(p["sku"] for p in body["items"]) == ["SUG-1", "TEA-100"]

    partial = auth_client.get("/api/products", params={"brand": "Tet"}).json()
    assert partial["total"] == 0


def test_page_size_is_clamped_and_echoed(auth_client, db):
    _seed(db)
    big = auth_client.get("/api/products", params={"pageSize": 1000}).json()
    assert big["pageSize"] == 200

    small = auth_client.get("/api/products", params={"pageSize": 0}).json()
    assert small["pageSize"] == 1
    assert len(small["items"]) == 1
    assert small["total"] == 4

    junk = auth_client.get("/api/products", params={"page": "abc", "pageSize": "x"}).json()
    assert junk["page"] == 1
    assert junk["pageSize"] == 50


def test_pagination_walks_all_rows(auth_client, db):
    _seed(db)
    seen = []
    for page in (1, 2):
        body = auth_client.get("/api/products", params={"page": page, "pageSize": 2}).json()
        assert body["page"] == page
        assert body["pageSize"] == 2
        seen.extend(p["sku"] for p in body["items"])
    assert sorted(seen) == ["COF-200", "SALT-1", "SUG-1", "TEA-100"]

    past_end = auth_client.get("/api/products", params={"page": 9, "pageSize": 2}).json()
    assert past_end["items"] == []
    assert past_end["total"] == 4


def test_brands_are_distinct_and_sorted(auth_client, db):
    _seed(db)
    db.add(Product(sku="X-1", name="Blank brand", brand=""))
    db.commit()
    res = auth_client.get("/api/brands")
    assert res.status_code == 200
    assert res.json() == {"brands": ["Bru", "Tetley", "tetley"]}


def test_search_treats_like_wildcards_literally(auth_client, db):
    _seed(db)
    for term in ("%", "_", "Tea%", "T_A"):
        body = auth_client.get("/api/products", params={"q": term}).json()
        assert body["total"] == 0, term
        assert body["items"] == []

    db.add(Product(sku="PROMO_1", name="Rusk 50% extra"))
    db.commit()
    assert [p["sku"] for p in auth_client.get("/api/products", params={"q": "50%"}).json()["items"]] == ["PROMO_1"]
    assert [p["sku"] for p in auth_client.get("/api/products", params={"q": "o_1"}).json()["items"]] == ["PROMO_1"]
