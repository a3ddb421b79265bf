"""
Jive Community Testing Utilities

Provides a fake Jive server and packet generators for community integration testing.
"""

from .mocks import (
    JIVE_URL,
    SIGNATURE_URL,
    generate_mock_registration,
    generate_mock_unregistration,
    build_mock_registry,
    EventRecorder,
    FakeJiveServer,
)

__all__ = [
    "JIVE_URL",
    "SIGNATURE_URL",
    "generate_mock_registration",
    "generate_mock_unregistration",
    "build_mock_registry",
    "EventRecorder",
    "FakeJiveServer",
]
