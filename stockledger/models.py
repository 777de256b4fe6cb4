from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class Product(Base):
    __tablename__ = "products"

    sku: Mapped[str] = mapped_column(String(64), primary_key=True)
    nombre: Mapped[str] = mapped_column(String(255), default="")
    categoria: Mapped[str] = mapped_column(String(100), default="")
    # Base stock only; the effective stock is derived from movements on read.
    stock: Mapped[float] = mapped_column(Float, default=0)
    precio: Mapped[float] = mapped_column(Float, default=0)


class Movement(Base):
    __tablename__ = "movements"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    date: Mapped[str] = mapped_column(String(32), index=True)
    product: Mapped[str] = mapped_column(String(255))
    # Plain lookup key, no foreign key: movements outlive their product.
    sku: Mapped[str] = mapped_column(String(64), index=True)
    movement: Mapped[str] = mapped_column(String(16))
    quantity: Mapped[float] = mapped_column(Float)
    user: Mapped[str] = mapped_column(String(255), default="System")
