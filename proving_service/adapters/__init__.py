"""Adapters to external collaborators (the proving backend)."""
