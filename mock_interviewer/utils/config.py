"""
Configuration module for {SYSTEM_NAME}.

This module provides configuration settings and utilities for the {SYSTEM_NAME}.
"""
import os
import logging
from typing import Dict, Any, List
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# MongoDB configuration
MONGODB_URI = os.environ.get("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DATABASE = os.environ.get("MONGODB_DATABASE", "mock_interviewer")
MONGODB_INTERVIEWS_COLLECTION = os.environ.get("MONGODB_INTERVIEWS_COLLECTION", "interviews")
MONGODB_FEEDBACK_COLLECTION = os.environ.get("MONGODB_FEEDBACK_COLLECTION", "feedback")

# LLM configuration
LLM_MODEL = os.environ.get("LLM_MODEL", "gemini-2.5-flash")
LLM_TEMPERATURE = float(os.environ.get("LLM_TEMPERATURE", "0.2"))

# Voice assistant configuration
VAPI_WORKFLOW_ID = os.environ.get("VAPI_WORKFLOW_ID", "")
CALL_CONNECT_TIMEOUT_SECONDS = float(os.environ.get("CALL_CONNECT_TIMEOUT_SECONDS", "30.0"))

# Query configuration
LATEST_INTERVIEWS_LIMIT = int(os.environ.get("LATEST_INTERVIEWS_LIMIT", "20"))

# Comma separated list of allowed frontend origins
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "http://localhost:3000")

# --- System Configuration ---
SYSTEM_NAME = os.getenv("SYSTEM_NAME", "Mock Interviewer")

def get_db_config() -> Dict[str, str]:
    """
    Get MongoDB configuration.

    Returns:
        Dictionary with MongoDB configuration
    """
    return {
        "uri": MONGODB_URI,
        "database": MONGODB_DATABASE,
        "interviews_collection": MONGODB_INTERVIEWS_COLLECTION,
        "feedback_collection": MONGODB_FEEDBACK_COLLECTION,
    }

def get_llm_config() -> Dict[str, Any]:
    """
    Get LLM configuration.

    Returns:
        Dictionary with LLM configuration
    """
    return {
        "model": LLM_MODEL,
        "temperature": LLM_TEMPERATURE,
    }

def get_call_config() -> Dict[str, Any]:
    """
    Get voice call configuration.

    Returns:
        Dictionary with voice call configuration
    """
    return {
        "workflow_id": VAPI_WORKFLOW_ID,
        "connect_timeout": CALL_CONNECT_TIMEOUT_SECONDS,
    }

def get_cors_origins() -> List[str]:
    """Get the list of allowed CORS origins."""
    return [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()]

def log_config():
    """Log current configuration values (excluding sensitive information)."""
    logger.info("Current configuration:")
    logger.info(f"- MongoDB Database: {MONGODB_DATABASE}")
    logger.info(f"- Interviews Collection: {MONGODB_INTERVIEWS_COLLECTION}")
    logger.info(f"- Feedback Collection: {MONGODB_FEEDBACK_COLLECTION}")
    logger.info(f"- LLM Model: {LLM_MODEL}")
    logger.info(f"- LLM Temperature: {LLM_TEMPERATURE}")
    logger.info(f"- Call Connect Timeout: {CALL_CONNECT_TIMEOUT_SECONDS} seconds")
    logger.info(f"- Latest Interviews Limit: {LATEST_INTERVIEWS_LIMIT}")
    logger.info(f"- CORS Origins: {', '.join(get_cors_origins())}")
    logger.info(f"- Voice Workflow: {'Configured' if VAPI_WORKFLOW_ID else 'Not configured'}")
