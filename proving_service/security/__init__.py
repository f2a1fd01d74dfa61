"""Security helpers (CORS)."""
