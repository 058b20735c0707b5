"""Admin authentication: fixture-backed token provider and request middleware."""
