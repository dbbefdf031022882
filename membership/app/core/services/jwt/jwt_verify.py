"""JWT verification service."""

import time

from authlib.jose import JoseError, jwt
from loguru import logger

from membership.app.core.errors import InvalidTokenError
from membership.app.core.models.claims import TokenClaims
from membership.app.runtime.context import get_config


class JwtVerificationService:
    """Verifies tokens signed by :class:`JwtGeneratorService`."""

    def verify_jwt(
        self,
        token: str,
        *,
        key: str | None = None,
        expected_purpose: str | None = None,
    ) -> TokenClaims:
        """Decode and validate a token.

        Args:
            token: Compact JWT
            key: Verification secret (defaults to ``app.signing_secret``)
            expected_purpose: Reject tokens minted for another purpose

        Raises:
            InvalidTokenError: On any signature, claim or purpose failure
        """
        cfg = get_config()
        verification_key = key or cfg.app.signing_secret
        if not verification_key:
            raise RuntimeError("JWT signing secret not configured")

        claims_options = {
            "iss": {"essential": True, "values": [cfg.jwt.gen_issuer]},
            "aud": {"essential": True, "values": cfg.jwt.audiences},
            "sub": {"essential": True},
        }

        try:
            claims = jwt.decode(
                token,
                verification_key,
                claims_options=claims_options,
            )
            claims.validate(leeway=cfg.jwt.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug(f"JWT verification failed: {exc}")
            raise InvalidTokenError() from exc

        if claims.header.get("alg") not in cfg.jwt.allowed_algorithms:
            raise InvalidTokenError("Disallowed JWT algorithm")

        # authlib does not enforce exp unless the claim is present
        exp = claims.get("exp")
        if exp is None or int(time.time()) > int(exp) + cfg.jwt.clock_skew:
            raise InvalidTokenError()

        parsed = TokenClaims.from_jwt_payload(dict(claims), raw_token=token)
        if expected_purpose is not None and parsed.purpose != expected_purpose:
            raise InvalidTokenError()
        return parsed
