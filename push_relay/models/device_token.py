from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from ..database import Base

class DeviceToken(Base):
    __tablename__ = "device_tokens"

    user_id = Column(String, primary_key=True)
    token = Column(String, nullable=False)
    platform = Column(String, default="unknown")  # ios / android / unknown
    registered_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
