# Fake implementations for testing

from .fake_store import FakeObjectStore

__all__ = ["FakeObjectStore"]
