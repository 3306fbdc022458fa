"""Response models for the auth and account endpoints."""
