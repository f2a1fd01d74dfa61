"""ASGI middleware: request ids, error mapping."""
