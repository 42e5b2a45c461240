import enum
from sqlalchemy import Column, Integer, String, Boolean, Float, Text, JSON, ForeignKey, TIMESTAMP, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class CarCondition(str, enum.Enum):
    NEW           = "NEW"
    RECONDITIONED = "RECONDITIONED"
    PRE_OWNED     = "PRE_OWNED"


class Car(Base):
    __tablename__ = "cars"

    id          = Column(Integer, primary_key=True, index=True)
    brand       = Column(String(100), nullable=False, index=True)
    model       = Column(String(100), nullable=False)
    year        = Column(Integer, nullable=False, index=True)
    condition   = Column(Enum(CarCondition), nullable=False, index=True)
    price       = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    images      = Column(JSON, default=list, nullable=False)   # ordered public paths
    approved    = Column(Boolean, default=False, nullable=False, index=True)
    userId      = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    createdAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False, index=True)
    updatedAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                         onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    user    = relationship("User", back_populates="cars")
    gallery = relationship("GalleryImage", back_populates="car",
                           cascade="all, delete-orphan", order_by="GalleryImage.id")

    def __repr__(self):
        return f"<Car id={self.id} {self.brand} {self.model} ({self.year}) approved={self.approved}>"
