"""Test utilities for notelink APIs::

    from notelink.testing import TestClient
"""

from notelink.testing.client import TestClient

__all__ = ["TestClient"]
