from fastapi import APIRouter, Depends
from ..schemas.device import DeviceRegister, DeviceUnregister
from ..dependencies import get_device_registry
from ..services.device_registry import DeviceRegistry
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/register-device")
def register_device(payload: DeviceRegister, devices: DeviceRegistry = Depends(get_device_registry)):
    """Register (or replace) the push token for a user"""
    devices.register(payload.userId, payload.deviceToken, payload.platform)
    return {
        "success": True,
        "message": "Device token registered successfully"
    }

@router.post("/unregister-device")
def unregister_device(payload: DeviceUnregister, devices: DeviceRegistry = Depends(get_device_registry)):
    # Unknown users are not an error; the token is gone either way
    devices.remove(payload.userId)
    return {
        "success": True,
        "message": "Device token unregistered successfully"
    }
