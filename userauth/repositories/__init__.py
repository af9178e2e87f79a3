"""
Persistence adapters.

Services depend on these repositories rather than opening SQLAlchemy sessions
themselves.
"""
