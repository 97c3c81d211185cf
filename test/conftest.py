from __future__ import annotations

from collections.abc import Iterator

import pytest

from hxserialize import TypeRegistry, default_registry


@pytest.fixture
def registry() -> TypeRegistry:
    return TypeRegistry()


@pytest.fixture
def isolated_default_registry() -> Iterator[TypeRegistry]:
    """Restore the process-wide registry's contents after a test modifies it."""
    saved = TypeRegistry(default_registry)
    yield default_registry
    default_registry._classes.clear()
    default_registry._enums.clear()
    default_registry.register_all(saved)
