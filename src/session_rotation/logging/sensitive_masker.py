"""
Logging - Sensitive Masker

Masquage automatique des jetons, mots de passe et adresses email.
"""

from typing import Any, Dict, List, Optional

from .interfaces import ISensitiveMasker


class SensitiveMasker(ISensitiveMasker):
    """
    Masquage récursif des données sensibles avant écriture dans les logs.

    Example:
        masker = SensitiveMasker()
        masker.mask({"refresh_token": "abc", "email": "jane@example.com"})
        # {"refresh_token": "***MASKED***", "email": "j***@example.com"}
    """

    def __init__(self, additional_patterns: Optional[List[str]] = None) -> None:
        """
        Args:
            additional_patterns: Patterns supplémentaires à masquer
        """
        self._patterns: List[str] = [p.lower() for p in self.SENSITIVE_PATTERNS]
        for pattern in additional_patterns or []:
            if pattern and pattern.lower() not in self._patterns:
                self._patterns.append(pattern.lower())

    @property
    def patterns(self) -> List[str]:
        return list(self._patterns)

    def mask(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Comportement:
            - Clés sensibles → valeur remplacée par MASK_VALUE
            - Clés de type email → adresse partiellement masquée
            - dict / list → récursion
        """
        if not isinstance(data, dict):
            return data

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if self.is_sensitive_key(key):
                result[key] = self.MASK_VALUE
            elif self._is_email_key(key) and isinstance(value, str):
                result[key] = self.mask_email(value)
            elif isinstance(value, dict):
                result[key] = self.mask(value)
            elif isinstance(value, list):
                result[key] = self._mask_list(value)
            else:
                result[key] = value
        return result

    def _mask_list(self, items: List[Any]) -> List[Any]:
        result = []
        for item in items:
            if isinstance(item, dict):
                result.append(self.mask(item))
            elif isinstance(item, list):
                result.append(self._mask_list(item))
            else:
                result.append(item)
        return result

    def mask_email(self, value: str) -> str:
        """
        Conserve le premier caractère et le domaine.

        Returns:
            ``j***@example.com``, ou MASK_VALUE si la valeur n'est pas une adresse
        """
        local, sep, domain = value.partition("@")
        if not sep or not local or not domain:
            return self.MASK_VALUE
        return f"{local[0]}***@{domain}"

    def is_sensitive_key(self, key: str) -> bool:
        """Vérification insensible à la casse, par inclusion."""
        if not key:
            return False
        key_lower = key.lower()
        return any(pattern in key_lower for pattern in self._patterns)

    def _is_email_key(self, key: str) -> bool:
        key_lower = key.lower()
        return any(pattern in key_lower for pattern in self.EMAIL_PATTERNS)

    def add_pattern(self, pattern: str) -> None:
        """
        Ajoute un pattern sensible.

        Raises:
            ValueError: Si pattern vide
        """
        if not pattern or not pattern.strip():
            raise ValueError("Pattern cannot be empty")
        pattern_lower = pattern.lower().strip()
        if pattern_lower not in self._patterns:
            self._patterns.append(pattern_lower)
