"""
Use cases for the userauth API.

Each service module orchestrates repositories/adapters to implement the
account lifecycle. Routers call these services instead of touching the
database, the mailer or the image library directly.
"""
