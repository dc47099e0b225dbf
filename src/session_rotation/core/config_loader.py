"""
Config Loader Implementation

Charge la configuration d'authentification depuis des fichiers YAML,
avec surcharge par variables d'environnement.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from .interfaces import AuthConfig, IConfigLoader


class ConfigIntegrityError(Exception):
    """Erreur d'intégrité de configuration."""

    pass


class ConfigLoader(IConfigLoader):
    """
    Chargement des configurations depuis fichiers YAML.

    Le fichier peut contenir une section ``auth:`` ou directement les clés
    de configuration. Les variables d'environnement ``SESSION_ROTATION_*``
    ont priorité sur le fichier (le secret ne devrait pas y être versionné).

    Example:
        loader = ConfigLoader("config")
        config = await loader.load("auth")
    """

    ENV_PREFIX: str = "SESSION_ROTATION_"
    ENV_KEYS = ("signing_key", "issuer", "audience")

    def __init__(self, configs_path: str = "config", environ: Optional[Mapping[str, str]] = None):
        """
        Args:
            configs_path: Dossier contenant les fichiers YAML
            environ: Variables d'environnement (défaut: os.environ)
        """
        self.configs_path = Path(configs_path)
        self._environ = environ if environ is not None else os.environ

    async def load(self, name: str) -> AuthConfig:
        """
        Charge la config ``<configs_path>/<name>.yaml``.

        Args:
            name: Nom du fichier sans extension

        Returns:
            AuthConfig validée

        Raises:
            ConfigIntegrityError: Si fichier inexistant ou structure invalide
        """
        config_file = self.configs_path / f"{name}.yaml"

        if not config_file.exists():
            raise ConfigIntegrityError(f"Configuration not found: {name}")

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigIntegrityError(f"YAML parsing error: {e}") from e
        except OSError as e:
            raise ConfigIntegrityError(f"Cannot read configuration file: {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigIntegrityError("Configuration must be a YAML mapping")

        return self.from_mapping(raw)

    def from_mapping(self, raw: Dict[str, Any]) -> AuthConfig:
        """
        Valide un dictionnaire déjà chargé.

        Raises:
            ConfigIntegrityError: Si valeurs invalides
        """
        section = raw.get("auth", raw)
        if not isinstance(section, dict):
            raise ConfigIntegrityError("auth section must be a mapping")

        values = dict(section)
        values.update(self._env_overrides())

        try:
            return AuthConfig(**values)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise ConfigIntegrityError(f"Invalid auth configuration: {fields}") from e

    def _env_overrides(self) -> Dict[str, str]:
        overrides = {}
        for key in self.ENV_KEYS:
            value = self._environ.get(f"{self.ENV_PREFIX}{key.upper()}")
            if value:
                overrides[key] = value
        return overrides
