from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class Platform(str, Enum):
    android = "android"
    ios = "ios"
    unknown = "unknown"


class DeviceRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

    user_id: str
    token: str
    platform: Platform = Platform.unknown
    registered_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DeviceRegister(BaseModel):
    deviceToken: Optional[str] = None
    userId: Optional[str] = None
    platform: Optional[str] = None


class DeviceUnregister(BaseModel):
    userId: Optional[str] = None
