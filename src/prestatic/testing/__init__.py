"""Test utilities for prestatic applications::

    from prestatic.testing import TestClient
"""

from prestatic.testing.client import TestClient

__all__ = ["TestClient"]
