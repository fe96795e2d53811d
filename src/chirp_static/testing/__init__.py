"""Test utilities for chirp-static applications.

    from chirp_static.testing import TestClient
"""

from chirp_static.testing.client import TestClient

__all__ = ["TestClient"]
