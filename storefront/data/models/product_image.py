from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, LargeBinary, DateTime
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductImageModel(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    content_type = Column(String(100), nullable=False)
    image_data = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    product = relationship("ProductModel", back_populates="images")
