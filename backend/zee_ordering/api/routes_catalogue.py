from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from zee_ordering.db import get_db
from zee_ordering.repositories.product_repo import ProductRepository
from zee_ordering.schemas.product_schema import BrandList, ProductOut, ProductPage
from zee_ordering.utils.numbers import to_int

router = APIRouter(tags=["catalogue"])

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


@router.get("/api/products", summary="Search and page through products")
def list_products(
    q: Optional[str] = Query(None, description="search term"),
    brand: Optional[str] = Query(None, description="exact brand, case-insensitive"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    db: Session = Depends(get_db),
):
    # lenient parsing: garbage falls back to defaults instead of a 4xx
    page_no = max(1, to_int(page, 1))
    size = min(MAX_PAGE_SIZE, max(1, to_int(page_size, DEFAULT_PAGE_SIZE)))

    repo = ProductRepository(db)
    items, total = repo.list(
        q=(q or "").strip() or None,
        brand=(brand or "").strip() or None,
        page=page_no,
        size=size,
    )
    result = ProductPage(
        items=[ProductOut.model_validate(p) for p in items],
        total=total,
        page=page_no,
        page_size=size,
    )
    return result.model_dump(by_alias=True, mode="json")


@router.get("/api/brands", summary="Distinct brands")
def list_brands(db: Session = Depends(get_db)):
    repo = ProductRepository(db)
    return BrandList(brands=repo.distinct_brands()).model_dump()
