# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_fingerprint, SpyBackend
"""

from .utils import FailingBackend, FakeBrowser, SpyBackend, make_fingerprint

__all__ = ["make_fingerprint", "SpyBackend", "FailingBackend", "FakeBrowser"]
