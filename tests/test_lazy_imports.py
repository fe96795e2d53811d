"""Tests for chirp_static.__init__ — every public name resolves lazily."""

import pytest

import chirp_static


@pytest.mark.parametrize("name", chirp_static.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(chirp_static, name)
    assert obj is not None, f"chirp_static.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        chirp_static.__getattr__("ThisDoesNotExist")


def test_version() -> None:
    assert chirp_static.__version__ == "0.1.0"
