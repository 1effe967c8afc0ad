# tests/test_config.py

"""
Tests for startup configuration checks.
"""

from unittest.mock import patch

import pytest

from config import check_required_settings
from main import create_app


class TestRequiredSettings:

    def test_missing_jwt_secret_stops_startup(self):
        with patch("config.JWT_SECRET", None):
            with pytest.raises(RuntimeError, match="JWT_SECRET"):
                create_app()

    def test_empty_jwt_secret_is_missing(self):
        with patch("config.JWT_SECRET", ""):
            with pytest.raises(RuntimeError):
                check_required_settings()

    def test_configured_secret_passes(self):
        check_required_settings()
