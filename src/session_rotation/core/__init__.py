"""
Core: configuration et primitives cryptographiques.
"""

from .interfaces import AuthConfig, IConfigLoader, ICryptoProvider
from .config_loader import ConfigLoader, ConfigIntegrityError
from .crypto_provider import CryptoProvider, CryptoProviderError

__all__ = [
    # Interfaces
    "IConfigLoader",
    "ICryptoProvider",
    # Data classes
    "AuthConfig",
    # Implementations
    "ConfigLoader",
    "CryptoProvider",
    # Exceptions
    "ConfigIntegrityError",
    "CryptoProviderError",
]
