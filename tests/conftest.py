"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add repo root to Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

import pytest
import structlog

from models.location import Location
from services import preview_cache_service
from tests.factories import LocationFactory, ProductFactory


# ===================
# LOGGING
# ===================

@pytest.fixture(autouse=True, scope="session")
def quiet_structlog():
    """Route structlog through a no-op logger so tests stay quiet."""
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


# ===================
# FIXTURES
# ===================

@pytest.fixture(autouse=True)
def clean_preview_cache():
    """Each test starts with no staged previews."""
    preview_cache_service.clear_previews()
    yield
    preview_cache_service.clear_previews()


@pytest.fixture(autouse=True)
def reset_factories():
    ProductFactory.reset_counter()
    LocationFactory.reset_counter()


@pytest.fixture
def locations() -> list[Location]:
    """
    Location catalog in display order.

    Usage:
        def test_something(locations):
            ...
    """
    return [
        LocationFactory.create(id="L1", name="Центральный магазин"),
        LocationFactory.create(id="L2", name="ТЦ Галерея"),
        LocationFactory.create(id="L3", name="Store Riverside"),
    ]


@pytest.fixture
def sample_csv() -> str:
    """Small comma-delimited file with name, size and quantity columns."""
    return (
        "Название,Размер,Остаток\n"
        "Chanel No5,5,10\n"
        "Dior Sauvage,car,4\n"
    )
