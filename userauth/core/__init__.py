"""
Core utilities shared across the userauth API.

This package hosts configuration, password hashing, session token signing,
the SMTP mailer and small URL helpers. Services depend on these primitives
instead of importing third-party libraries directly.
"""
