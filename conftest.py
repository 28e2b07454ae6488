# =============================================================================
# CONFTEST - Global pytest fixtures
# =============================================================================
# Environment isolation shared by every test (no .env, no MongoDB, no network)
# =============================================================================

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Root modules (server, app_state) importable without installation
sys.path.insert(0, str(Path(__file__).parent))


# =============================================================================
# ENVIRONMENT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_env():
    """Force the in-memory backend and quiet logs."""
    env_vars = {
        "QUIZ_STORAGE_BACKEND": "memory",
        "MONGODB_DB": "quizmaster_test",
        "TRIVIA_API_URL": "https://trivia.test/api.php",
        "TRIVIA_CATEGORIES_URL": "https://trivia.test/api_category.php",
        "LOG_LEVEL": "ERROR",
    }
    with patch.dict(os.environ, env_vars):
        yield


@pytest.fixture
def clean_env():
    """Run a test with an empty environment."""
    with patch.dict(os.environ, {}, clear=True):
        yield
