"""
FastAPI routers for the Mock Interviewer platform.

This module contains FastAPI routers for organizing API endpoints
into logical groups.
"""

from . import call_session, interviews

__all__ = ["call_session", "interviews"]
