"""
Configuration API for the Mock Interviewer platform.
"""
from fastapi import APIRouter, Request, HTTPException
from pydantic import BaseModel, Field
from typing import Dict
import logging

from mock_interviewer.utils.config import SYSTEM_NAME, get_call_config

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

# Define Pydantic model for config response
class ConfigResponse(BaseModel):
    """Model for system configuration response."""
    system_name: str = Field(..., description="Name of the mock interviewer system")
    version: str = Field(..., description="API version")
    connect_timeout: float = Field(..., description="Seconds a call may spend connecting")
    features: Dict[str, bool] = Field(default_factory=dict, description="Available system features")

@router.get("/api/system-config", response_model=ConfigResponse)
async def get_system_config(request: Request):
    """Get system configuration details."""
    try:
        app = request.app
        call_config = get_call_config()

        return {
            "system_name": SYSTEM_NAME,
            "version": getattr(app, "version", "1.0.0"),
            "connect_timeout": call_config["connect_timeout"],
            "features": {
                "interview_generation": bool(call_config["workflow_id"]) and getattr(app.state, "interview_generator", None) is not None,
                "feedback": getattr(app.state, "feedback_service", None) is not None,
                "interview_store": getattr(app.state, "repository", None) is not None
            }
        }
    except Exception as e:
        logger.error(f"Error getting system config: {e}")
        raise HTTPException(status_code=500, detail=str(e))
