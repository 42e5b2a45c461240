from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class GalleryImage(Base):
    __tablename__ = "gallery"

    id        = Column(Integer, primary_key=True, index=True)
    imageUrl  = Column(String(500), nullable=False)
    carId     = Column(Integer, ForeignKey("cars.id", ondelete="CASCADE"), nullable=False, index=True)
    createdAt = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    car = relationship("Car", back_populates="gallery")

    def __repr__(self):
        return f"<GalleryImage id={self.id} car={self.carId} url={self.imageUrl}>"
