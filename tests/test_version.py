"""Test version import works correctly.

Guards against packaging errors where __version__ is missing or not set.
"""

from reelname import __version__


def test_version() -> None:
    """Test that version is a non-empty string."""
    assert isinstance(__version__, str)
    assert len(__version__) > 0
