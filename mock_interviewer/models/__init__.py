"""
Data models for the Mock Interviewer platform.
"""
