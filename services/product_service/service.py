from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import StoreError, ValidationError

from .models import Product
from .repository import ProductRepository
from .schemas import ProductWrite


def parse_price_cents(price: Optional[Union[str, int, float]]) -> int:
    """
    Admin prices arrive as display strings in reais ("12,50", "R$ 1.234,56",
    "19.90") or plain numbers. Returns integer cents; an empty price is 0.
    """
    if price is None or (isinstance(price, str) and not price.strip()):
        return 0
    if isinstance(price, bool):
        raise ValidationError(f"Invalid price: {price!r}")

    if isinstance(price, (int, float)):
        raw = str(price)
    else:
        raw = price.replace("R$", "").replace(" ", "").strip()
        if "," in raw:
            # Brazilian format: dots group thousands, comma is the decimal mark
            raw = raw.replace(".", "").replace(",", ".")
        elif raw.count(".") > 1:
            raw = raw.replace(".", "")

    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise ValidationError(f"Invalid price: {price!r}")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"Invalid price: {price!r}")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class ProductService:

    @staticmethod
    async def list_active_products(db: AsyncSession):
        try:
            return await ProductRepository.get_active_products(db)
        except SQLAlchemyError as exc:
            raise StoreError() from exc

    @staticmethod
    async def list_products(db: AsyncSession):
        return await ProductRepository.get_all_products(db)

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductWrite):
        product = Product(
            type=data.type,
            name=data.name,
            price=data.price,
            image_url=data.image_url,
            description=data.description,
            active=True,
        )
        return await ProductRepository.create_product(db, product)

    @staticmethod
    async def edit_product(db: AsyncSession, product_id: int, data: ProductWrite):
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise ValidationError(f"Product {product_id} not found")

        product.type = data.type
        product.name = data.name
        product.price = data.price
        product.image_url = data.image_url
        product.description = data.description
        return await ProductRepository.update_product(db, product)

    @staticmethod
    async def delete_product(db: AsyncSession, product_id: int) -> bool:
        return await ProductRepository.delete_product(db, product_id)
