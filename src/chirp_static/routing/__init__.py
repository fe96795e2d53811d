"""Routing — exact-path route table."""

from chirp_static.routing.router import Route, Router

__all__ = ["Route", "Router"]
