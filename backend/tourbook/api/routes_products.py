from typing import List

from fastapi import APIRouter, Depends

from tourbook.api import get_catalog
from tourbook.models.schemas import ProductSchema
from tourbook.services.catalog import ProductCatalog

router = APIRouter()


@router.get("", response_model=List[ProductSchema])
def list_products(catalog: ProductCatalog = Depends(get_catalog)) -> List[ProductSchema]:
    return [ProductSchema.from_domain(p) for p in catalog.list_products()]
