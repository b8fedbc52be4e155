from sqlalchemy import Column, String, Boolean, DateTime, JSON
from sqlalchemy.sql import func
from ..database import Base

class Webhook(Base):
    __tablename__ = "webhooks"

    webhook_id = Column(String, primary_key=True)
    user_id = Column(String, index=True, nullable=False)
    webhook_url = Column(String, nullable=False)
    events = Column(JSON, nullable=False, default=list)  # e.g. ["sms:sent", "sms:received"]
    active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
