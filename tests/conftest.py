"""
Pytest configuration and shared fixtures for JSON Query Compiler tests

APPROACH: Build QueryContext directly from in-memory model handles
- No database or network access; the compiler performs no I/O
- Each test gets its own registry and context (no shared state)
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config import QuerySettings
from context import ModelRegistry, QueryContext
from jsonquery.builder import QueryBuilder
from jsonquery.translator import JsonFilterTranslator


def pytest_configure(config):
    """
    Pytest hook called before test collection.
    """
    os.environ['APP_ENV'] = 'test'


class FakeModel:
    """Stand-in relation handle; the compiler treats handles as opaque."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f"FakeModel({self.name!r})"


@pytest.fixture
def models():
    return {
        "pictures": FakeModel("pictures"),
        "users": FakeModel("users"),
        "images": FakeModel("images"),
    }


@pytest.fixture
def registry(models):
    return ModelRegistry(models)


@pytest.fixture
def translator():
    return JsonFilterTranslator()


@pytest.fixture
def settings():
    return QuerySettings.defaults()


@pytest.fixture
def context(registry, translator, settings):
    return QueryContext(registry=registry, translator=translator, settings=settings)


@pytest.fixture
def builder(translator):
    return QueryBuilder(translator)
