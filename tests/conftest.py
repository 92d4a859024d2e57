"""
Shared pytest fixtures.
"""
import pytest
import structlog

import app.utils.logger  # noqa: F401  (configures structlog on import)
from app.config import config

# capture_logs() only sees loggers that were not cached on first use
structlog.configure(cache_logger_on_first_use=False)


@pytest.fixture
def product_url():
    return "https://www.aliexpress.com/item/1005006123456789.html"


@pytest.fixture
def placeholder_image():
    return config.PLACEHOLDER_IMAGE


@pytest.fixture
def site_origin():
    return config.SITE_ORIGIN
