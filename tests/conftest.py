import pytest

from huecraft.capabilities import Capabilities, detect_capabilities
from huecraft.diagnostics import Diagnostics
from huecraft.registry import InterpolatorRegistry


@pytest.fixture
def diagnostics():
    return Diagnostics()


@pytest.fixture
def registry(diagnostics):
    return InterpolatorRegistry(detect_capabilities(), diagnostics)


@pytest.fixture
def rgb_only_registry(diagnostics):
    return InterpolatorRegistry(Capabilities.none(), diagnostics)
