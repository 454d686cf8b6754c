"""
utils/ - Shared Helpers
=======================
Logging setup and form-input validation.
"""
