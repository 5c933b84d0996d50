"""Domain layer - identity, tenancy and access rules independent of FastAPI."""
