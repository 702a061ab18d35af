"""
Utility functions for the expense tracker.

This package contains:
- datetime_utils: UTC helpers, ISO parsing, duration strings
- validation_utils: Reusable field validators for the Pydantic schemas
- security: Password hashing and JWT helpers
"""
