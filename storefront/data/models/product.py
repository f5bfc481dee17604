from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, Numeric, DateTime
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(1000), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    #upload order
    images = relationship(
        "ProductImageModel",
        back_populates="product",
        order_by="ProductImageModel.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
