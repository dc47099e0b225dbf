"""
session_rotation - Pytest Configuration
Fixtures partagées pour tous les tests.
"""

from datetime import datetime, timezone

import pytest

from session_rotation.core import AuthConfig, CryptoProvider

SIGNING_KEY = "test-signing-key-0123456789abcdef-0123456789"
ISSUER = "session-rotation-tests"


@pytest.fixture
def auth_config() -> AuthConfig:
    """Configuration par défaut (30 min / 5 jours)."""
    return AuthConfig(signing_key=SIGNING_KEY, issuer=ISSUER)


@pytest.fixture
def fast_crypto() -> CryptoProvider:
    """Scrypt à coût réduit pour garder les tests rapides."""
    return CryptoProvider(scrypt_n=2**8)


@pytest.fixture
def fixed_now() -> datetime:
    """Instant de référence des horloges injectées."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
