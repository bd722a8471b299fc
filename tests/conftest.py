# tests/conftest.py
import pytest

from estimator.service.io import load_params
from estimator.service.presets import load_preset


@pytest.fixture(scope="session")
def params():
    return load_params()


@pytest.fixture(scope="session")
def standard(params):
    return load_preset("standard", params)


@pytest.fixture(scope="session")
def thumb_rule(params):
    return load_preset("thumb_rule", params)
