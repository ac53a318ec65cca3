"""
{SYSTEM_NAME} Package.

This package runs voice mock interviews: it drives live call sessions,
generates interviews and scores finished ones.
"""

__version__ = "0.1.0"

from mock_interviewer.core.call_session import CallSessionController
from mock_interviewer.utils.config import SYSTEM_NAME
