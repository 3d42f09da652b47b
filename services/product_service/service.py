import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import ProductNotFound, ValidationError

from .models import Product
from .repository import ProductRepository
from .schemas import ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)


class ProductService:

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductCreate) -> Product:
        product = Product(**data.model_dump(), rating=0, reviews=[])
        product = await ProductRepository.create_product(db, product)
        logger.info("product_created", product_id=product.id)
        return product

    @staticmethod
    async def list_products(db: AsyncSession, search: str | None = None, category: str | None = None):
        return await ProductRepository.list_products(db, search=search, category=category)

    @staticmethod
    async def get_product(db: AsyncSession, product_id: int) -> Product:
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise ProductNotFound()
        return product

    @staticmethod
    async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate) -> Product:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("No changes supplied")
        for field in ("name", "price", "stock"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")

        product = await ProductService.get_product(db, product_id)
        for field, value in changes.items():
            setattr(product, field, value)
        product = await ProductRepository.update_product(db, product)
        logger.info("product_updated", product_id=product.id, fields=sorted(changes))
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, product_id: int) -> None:
        product = await ProductService.get_product(db, product_id)
        await ProductRepository.delete_product(db, product)
        logger.info("product_deleted", product_id=product_id)
