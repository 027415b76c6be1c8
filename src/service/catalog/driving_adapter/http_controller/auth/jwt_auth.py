"""
Bearer token verification

With JWT_ISSUER_URI configured, tokens are RS256-signed by the identity
provider and verified against its JWKS endpoint
({issuer}/protocol/openid-connect/certs). Without it, tokens are verified
with the shared SECRET_KEY (local/dev/test).
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, FrozenSet, Iterable, Optional

import anyio
import attrs
import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError


@attrs.frozen
class Principal:
    subject: str
    scopes: FrozenSet[str] = frozenset()

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes


class JwtAuth:
    def __init__(
        self,
        *,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        issuer_uri: Optional[str] = None,
        audience: Optional[str] = None,
        jwk_client: Optional[jwt.PyJWKClient] = None,
    ) -> None:
        self.secret = secret if secret is not None else settings.SECRET_KEY.get_secret_value()
        self.algorithm = algorithm or settings.ALGORITHM
        self.issuer_uri = issuer_uri if issuer_uri is not None else settings.JWT_ISSUER_URI
        self.audience = audience if audience is not None else settings.JWT_AUDIENCE
        self.token_expire_minutes = 60

        self.jwk_client = jwk_client
        if self.jwk_client is None and self.issuer_uri:
            self.jwk_client = jwt.PyJWKClient(
                f'{self.issuer_uri.rstrip("/")}/protocol/openid-connect/certs'
            )

    def create_jwt_token(self, *, subject: str, scopes: Iterable[str] = ()) -> str:
        """Shared-secret tokens for local runs and tests."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            'sub': subject,
            'scope': ' '.join(scopes),
            'iat': now,
            'exp': now + timedelta(minutes=self.token_expire_minutes),
        }
        if self.audience:
            payload['aud'] = self.audience
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        options = {'verify_aud': self.audience is not None}
        try:
            if self.jwk_client is not None:
                signing_key = self.jwk_client.get_signing_key_from_jwt(token)
                return jwt.decode(
                    token,
                    signing_key.key,
                    algorithms=['RS256'],
                    issuer=self.issuer_uri,
                    audience=self.audience,
                    options=options,
                )
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options=options,
            )
        except jwt.PyJWTError as e:
            raise AuthenticationError(f'Invalid token: {e}') from e

    @staticmethod
    def extract_scopes(payload: Dict[str, Any]) -> FrozenSet[str]:
        scope = payload.get('scope')
        if isinstance(scope, str):
            return frozenset(scope.split())

        scp = payload.get('scp')
        if isinstance(scp, str):
            return frozenset(scp.split())
        if isinstance(scp, list):
            return frozenset(str(item) for item in scp)
        return frozenset()

    def get_principal(self, token: Optional[str]) -> Principal:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)
        subject = payload.get('sub')
        if not subject:
            raise AuthenticationError('Invalid token: missing subject')

        return Principal(subject=str(subject), scopes=self.extract_scopes(payload))

    async def verify(self, token: Optional[str]) -> Principal:
        """JWKS lookups block on the network, so they run in a worker thread."""
        if self.jwk_client is not None:
            return await anyio.to_thread.run_sync(self.get_principal, token)
        return self.get_principal(token)
