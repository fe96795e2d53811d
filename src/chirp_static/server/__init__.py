"""ASGI server integration: request handling, error mapping, response sending."""
