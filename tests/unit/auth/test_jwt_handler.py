"""
Tests unitaires pour JWTHandler.
"""

import base64
import json
import string
from datetime import timedelta

import jwt
import pytest

from session_rotation.auth import ClaimSet, ClaimTypes, InvalidTokenError, JWTHandler, identity_claims
from session_rotation.core import AuthConfig


def _b64url(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


BASE64URL_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"


@pytest.fixture
def handler(auth_config, fixed_now):
    return JWTHandler(auth_config, clock=lambda: fixed_now)


@pytest.fixture
def token(handler):
    return handler.generate(JWTHandler.default_claims("Jane", "jane@example.com"))


# ══════════════════════════════════════════════════════════════════════════════
# GÉNÉRATION
# ══════════════════════════════════════════════════════════════════════════════


class TestGenerate:
    """Tests de génération."""

    def test_compact_format(self, token):
        assert token.count(".") == 2

    def test_header_pins_hs256(self, token):
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_payload_claims(self, token, auth_config, fixed_now):
        """exp = now + 30 min, nbf = now, iss/aud de la configuration."""
        payload = jwt.decode(token, options={"verify_signature": False})

        assert payload["email"] == "jane@example.com"
        assert payload["name"] == "Jane"
        assert payload["exp"] == int((fixed_now + timedelta(minutes=30)).timestamp())
        assert payload["nbf"] == int(fixed_now.timestamp())
        assert payload["iss"] == auth_config.issuer
        assert payload["aud"] == auth_config.issuer

    def test_reserved_claims_overridden(self, handler, fixed_now):
        """Un exp fourni par l'appelant ne peut pas prolonger le jeton."""
        claims = ClaimSet.of(("email", "jane@example.com"), ("exp", "9999999999"), ("iss", "attacker"))

        payload = jwt.decode(handler.generate(claims), options={"verify_signature": False})

        assert payload["exp"] == int((fixed_now + timedelta(minutes=30)).timestamp())
        assert payload["iss"] == handler.issuer

    def test_input_claims_not_modified(self, handler):
        claims = JWTHandler.default_claims("Jane", "jane@example.com")
        handler.generate(claims)
        assert len(claims) == 2

    def test_repeated_claim_becomes_list(self, handler):
        claims = ClaimSet.of(("email", "jane@example.com"), ("role", "admin"), ("role", "user"))

        payload = jwt.decode(handler.generate(claims), options={"verify_signature": False})

        assert payload["role"] == ["admin", "user"]

    @pytest.mark.parametrize("first_name,email", [(None, "jane@example.com"), ("Jane", ""), ("", None)])
    def test_default_claims_require_name_and_email(self, first_name, email):
        with pytest.raises(ValueError):
            JWTHandler.default_claims(first_name, email)

    def test_default_claims_are_identity_claims(self):
        assert JWTHandler.default_claims is identity_claims


# ══════════════════════════════════════════════════════════════════════════════
# VALIDATION (CHEMIN DE RENOUVELLEMENT)
# ══════════════════════════════════════════════════════════════════════════════


class TestValidateExpired:
    """Validation sans contrôle de durée de vie."""

    def test_round_trip(self, handler, token):
        claims = handler.validate_expired(token)

        assert claims.find_first(ClaimTypes.EMAIL) == "jane@example.com"
        assert claims.find_first(ClaimTypes.NAME) == "Jane"
        assert claims.find_first(ClaimTypes.ISSUER) == handler.issuer

    def test_expired_token_accepted(self, auth_config, fixed_now):
        """Un JWT expiré depuis longtemps reste valide pour le renouvellement."""
        old = JWTHandler(auth_config, clock=lambda: fixed_now - timedelta(days=3))
        token = old.generate(JWTHandler.default_claims("Jane", "jane@example.com"))

        claims = JWTHandler(auth_config).validate_expired(token)

        assert claims.find_first(ClaimTypes.EMAIL) == "jane@example.com"

    def test_tampered_payload_rejected(self, handler, token):
        header, _payload, signature = token.split(".")
        forged_payload = jwt.decode(token, options={"verify_signature": False})
        forged_payload["email"] = "mallory@example.com"
        forged = ".".join([header, _b64url(forged_payload), signature])

        with pytest.raises(InvalidTokenError):
            handler.validate_expired(forged)

    @pytest.mark.parametrize("position", [0, 10, -1])
    def test_altered_signature_rejected(self, handler, token, position):
        """Un seul caractère de signature modifié, dernier compris."""
        head, signature = token.rsplit(".", 1)
        chars = list(signature)
        # décalage de 16: change aussi les bits significatifs du dernier caractère
        chars[position] = BASE64URL_ALPHABET[(BASE64URL_ALPHABET.index(chars[position]) + 16) % 64]
        altered = head + "." + "".join(chars)

        assert altered != token
        with pytest.raises(InvalidTokenError):
            handler.validate_expired(altered)

    def test_other_key_rejected(self, handler, fixed_now):
        other = JWTHandler(
            AuthConfig(signing_key="another-signing-key-0123456789abcdef", issuer=handler.issuer),
            clock=lambda: fixed_now,
        )
        token = other.generate(JWTHandler.default_claims("Jane", "jane@example.com"))

        with pytest.raises(InvalidTokenError):
            handler.validate_expired(token)

    def test_alg_none_rejected(self, handler, token):
        payload = jwt.decode(token, options={"verify_signature": False})
        unsigned = f"{_b64url({'alg': 'none', 'typ': 'JWT'})}.{_b64url(payload)}."

        with pytest.raises(InvalidTokenError):
            handler.validate_expired(unsigned)

    def test_other_hmac_algorithm_rejected(self, handler, auth_config, token):
        """Même secret, HS512: refusé malgré une signature correcte."""
        payload = jwt.decode(token, options={"verify_signature": False})
        hs512 = jwt.encode(payload, auth_config.signing_key, algorithm="HS512")

        with pytest.raises(InvalidTokenError):
            handler.validate_expired(hs512)

    def test_wrong_issuer_rejected(self, handler, auth_config, fixed_now):
        other = JWTHandler(
            AuthConfig(signing_key=auth_config.signing_key, issuer="other-issuer", audience=handler.audience),
            clock=lambda: fixed_now,
        )
        token = other.generate(JWTHandler.default_claims("Jane", "jane@example.com"))

        with pytest.raises(InvalidTokenError):
            handler.validate_expired(token)

    def test_wrong_audience_rejected(self, handler, auth_config, fixed_now):
        other = JWTHandler(
            AuthConfig(signing_key=auth_config.signing_key, issuer=handler.issuer, audience="other-api"),
            clock=lambda: fixed_now,
        )
        token = other.generate(JWTHandler.default_claims("Jane", "jane@example.com"))

        with pytest.raises(InvalidTokenError):
            handler.validate_expired(token)

    def test_missing_required_claim_rejected(self, handler, auth_config):
        token = jwt.encode(
            {"email": "jane@example.com", "iss": handler.issuer, "aud": handler.audience, "nbf": 0},
            auth_config.signing_key,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            handler.validate_expired(token)

    @pytest.mark.parametrize("value", ["", None, "not-a-jwt", "a.b.c", 42])
    def test_malformed_rejected(self, handler, value):
        with pytest.raises(InvalidTokenError):
            handler.validate_expired(value)

    def test_uniform_message(self, handler, token):
        """Même message quelle que soit la cause du refus."""
        messages = set()
        for bad in ["", "a.b.c", token.rsplit(".", 1)[0] + ".AAAA"]:
            with pytest.raises(InvalidTokenError) as exc_info:
                handler.validate_expired(bad)
            messages.add(str(exc_info.value))

        assert messages == {"Invalid token"}


class TestIsExpired:
    def test_not_expired_before_lifetime(self, auth_config, fixed_now, token):
        later = JWTHandler(auth_config, clock=lambda: fixed_now + timedelta(minutes=29))
        assert later.is_expired(token) is False

    def test_expired_at_boundary(self, auth_config, fixed_now, token):
        """exp == now est déjà expiré."""
        later = JWTHandler(auth_config, clock=lambda: fixed_now + timedelta(minutes=30))
        assert later.is_expired(token) is True

    def test_forged_token_raises(self, handler):
        with pytest.raises(InvalidTokenError):
            handler.is_expired("a.b.c")
