from pydantic import BaseModel
from typing import List, Optional


class SmsRequest(BaseModel):
    userId: Optional[str] = None
    phoneNumber: Optional[str] = None
    message: Optional[str] = None


class MulticastSmsRequest(BaseModel):
    userIds: Optional[List[str]] = None
    phoneNumber: Optional[str] = None
    message: Optional[str] = None


class TopicSmsRequest(BaseModel):
    topic: Optional[str] = None
    phoneNumber: Optional[str] = None
    message: Optional[str] = None


class TopicSubscribeRequest(BaseModel):
    userIds: Optional[List[str]] = None
    topic: Optional[str] = None
