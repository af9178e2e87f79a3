"""User authentication backend: registration, email verification, JWT sessions,
subscription tiers and avatar uploads."""
