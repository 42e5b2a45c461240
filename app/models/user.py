from sqlalchemy import Column, Integer, String, Boolean, Text, Enum, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.role import RoleName


class User(Base):
    __tablename__ = "users"

    id            = Column(Integer, primary_key=True, index=True)
    name          = Column(String(150), nullable=False)
    email         = Column(String(255), unique=True, nullable=False, index=True)
    password      = Column(String(255), nullable=False)
    role          = Column(Enum(RoleName), default=RoleName.OWNER, nullable=False, index=True)
    phone         = Column(String(50), nullable=True)
    address       = Column(Text, nullable=True)
    # Business attributes, only meaningful for SHOP / VENDOR
    businessName  = Column(String(200), nullable=True)
    businessType  = Column(String(100), nullable=True)
    licenseNumber = Column(String(100), nullable=True)
    isVerified    = Column(Boolean, default=False, nullable=False)
    createdAt     = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt     = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                           onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    cars = relationship("Car", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"
