from typing import List, Optional
import uuid
from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey, Text, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from sqlalchemy.ext.orderinglist import ordering_list
from app.database.connection import Base


PROPERTY_TYPES = ("apartment", "house", "condo", "townhouse", "land", "commercial", "office", "warehouse")
LISTING_TYPES = ("sale", "rent", "lease")
PROPERTY_STATUSES = ("draft", "active", "pending", "sold", "rented", "inactive")
PRICE_TYPES = ("total", "per_month", "per_year", "per_sqft")
AREA_UNITS = ("sqft", "sqm", "acres", "hectares")
FURNISHING_TYPES = ("unfurnished", "semi-furnished", "fully-furnished")
AMENITIES = (
    "swimming_pool", "gym", "garden", "balcony", "elevator", "security",
    "power_backup", "water_supply", "internet", "ac", "heating",
    "parking", "playground", "clubhouse", "laundry", "storage",
)


class Property(Base):
    __tablename__ = "properties"

    id = Column(String, primary_key=True)
    agent_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String, nullable=False, index=True)
    listing_type = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default="draft", index=True)
    featured = Column(Boolean, nullable=False, default=False)

    # Price
    price_amount = Column(Float, nullable=False, index=True)
    price_currency = Column(String, nullable=False, default="INR")
    price_type = Column(String, nullable=False, default="total")

    # Address
    street = Column(String, nullable=False)
    city = Column(String, nullable=False, index=True)
    state = Column(String, nullable=False)
    zip_code = Column(String, nullable=False)
    country = Column(String, nullable=False, default="India")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Specifications
    bedrooms = Column(Integer, nullable=False, default=0)
    bathrooms = Column(Integer, nullable=False, default=0)
    area_value = Column(Float, nullable=False)
    area_unit = Column(String, nullable=False, default="sqft")
    floors = Column(Integer, nullable=True)
    parking = Column(Integer, nullable=False, default=0)
    furnished = Column(String, nullable=False, default="unfurnished")
    year_built = Column(Integer, nullable=True)

    amenities = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    seo_title = Column(String, nullable=True)
    seo_description = Column(String, nullable=True)

    # Contact info
    contact_phone = Column(String, nullable=False)
    contact_email = Column(String, nullable=True)
    contact_whatsapp = Column(String, nullable=True)

    is_verified = Column(Boolean, nullable=False, default=False)

    # Analytics
    views = Column(Integer, nullable=False, default=0)
    impressions = Column(Integer, nullable=False, default=0)
    clicks = Column(Integer, nullable=False, default=0)
    saves = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    agent = relationship("User", backref="properties")
    images = relationship(
        "PropertyImage",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyImage.position",
        collection_class=ordering_list("position"),
    )
    inquiries = relationship(
        "PropertyInquiry",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyInquiry.created_at",
    )

    __mapper_args__ = {"eager_defaults": True}

    # Composite indexes for common query patterns
    __table_args__ = (
        Index('idx_properties_city_state', 'city', 'state'),
        Index('idx_properties_type_listing', 'type', 'listing_type'),
        Index('idx_properties_status_featured', 'status', 'featured'),
    )

    @property
    def primary_image(self) -> Optional["PropertyImage"]:
        for image in self.images:
            if image.is_primary:
                return image
        return None

    def add_images(self, uploads: List[dict]) -> List["PropertyImage"]:
        """
        Append uploaded images. The first new image becomes primary only when
        the property had no images before.
        """
        had_images = len(self.images) > 0
        added = []
        for index, upload in enumerate(uploads):
            image = PropertyImage(
                id=str(uuid.uuid4()),
                public_id=upload["public_id"],
                url=upload["url"],
                caption=upload.get("caption") or "",
                is_primary=index == 0 and not had_images,
            )
            self.images.append(image)
            added.append(image)
        return added

    def update_image(
        self,
        image_id: str,
        caption: Optional[str] = None,
        is_primary: Optional[bool] = None,
    ) -> Optional["PropertyImage"]:
        image = self._find_image(image_id)
        if image is None:
            return None

        if caption is not None:
            image.caption = caption

        if is_primary:
            for other in self.images:
                other.is_primary = False
            image.is_primary = True

        return image

    def remove_image(self, image_id: str) -> Optional["PropertyImage"]:
        """Detach an image; promote the first remaining image if the primary was removed"""
        image = self._find_image(image_id)
        if image is None:
            return None

        self.images.remove(image)

        if image.is_primary and self.images:
            self.images[0].is_primary = True

        return image

    def _find_image(self, image_id: str) -> Optional["PropertyImage"]:
        for image in self.images:
            if image.id == image_id:
                return image
        return None


class PropertyImage(Base):
    __tablename__ = "property_images"

    id = Column(String, primary_key=True)
    property_id = Column(String, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
    public_id = Column(String, nullable=False)
    url = Column(String, nullable=False)
    caption = Column(String, nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)

    property = relationship("Property", back_populates="images")


class PropertyInquiry(Base):
    __tablename__ = "property_inquiries"

    id = Column(String, primary_key=True)
    property_id = Column(String, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    message = Column(Text, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    property = relationship("Property", back_populates="inquiries")
    user = relationship("User")
