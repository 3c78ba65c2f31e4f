"""ASGI adapter: turns ASGI scopes into routed requests and responses back into ASGI messages."""
