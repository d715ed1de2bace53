"""
Generic response schemas
"""

from pydantic import BaseModel


class SuccessFlag(BaseModel):
    """Bare acknowledgement"""
    success: bool = True


class ServiceStatus(BaseModel):
    """Root endpoint response"""
    status: str
    service: str
