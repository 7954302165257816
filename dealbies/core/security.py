from __future__ import annotations

import jwt

from dealbies.core.config import settings


class TokenError(Exception):
    pass


# -------------------------
# Identity provider tokens
# -------------------------
def decode_token(token: str) -> dict:
    """Verify an access token issued by the identity provider."""
    options = {}
    audience = settings.AUTH_JWT_AUDIENCE or None
    if audience is None:
        options["verify_aud"] = False

    try:
        return jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALG],
            audience=audience,
            options=options,
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise TokenError("Invalid token") from e


def token_subject(token: str) -> str:
    payload = decode_token(token)
    sub = payload.get("sub")
    if not sub:
        raise TokenError("Token missing subject")
    return str(sub)
