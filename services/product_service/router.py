from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import get_current_admin

from .schemas import ProductCreate, ProductListResponse, ProductResponse, ProductUpdate
from .service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])
# Every admin route requires the admin role
admin_router = APIRouter(
    prefix="/admin/products",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=ProductListResponse)
async def list_products(
    search: str | None = Query(default=None, max_length=100),
    category: str | None = Query(default=None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    products = await ProductService.list_products(db, search=search, category=category)
    return ProductListResponse(products=[ProductResponse.model_validate(p) for p in products])


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await ProductService.get_product(db, product_id)


@admin_router.post("", response_model=ProductResponse)
async def create_product(payload: ProductCreate, db: AsyncSession = Depends(get_db)):
    return await ProductService.create_product(db, payload)


@admin_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: int, payload: ProductUpdate, db: AsyncSession = Depends(get_db)):
    return await ProductService.update_product(db, product_id, payload)


@admin_router.delete("/{product_id}")
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    await ProductService.delete_product(db, product_id)
    return {"message": "Product deleted successfully"}
