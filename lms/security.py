"""密码哈希与 Token 签发（无外部 JWT 依赖）。"""

import base64
import hashlib
import hmac
import json
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from lms.config import Settings, get_settings

PBKDF2_ITERATIONS = 120_000


def hash_password(password: str) -> str:
    """PBKDF2-SHA256，每个密码独立随机盐，存储为 ``salt$digest``。"""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    salt, _, expected = hashed_password.partition("$")
    if not expected:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", plain_password.encode(), salt.encode(), PBKDF2_ITERATIONS)
    return hmac.compare_digest(digest.hex(), expected)


@dataclass(frozen=True)
class TokenClaims:
    entity_id: str
    email: str
    kind: str
    expires_at: datetime


class TokenIssuer:
    """签发/校验携带实体 id 与 email 的 Bearer Token。"""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self.secret_key = settings.secret_key
        self.expire_delta = timedelta(days=settings.token_expire_days)

    def issue(self, entity_id: str, email: str, kind: str = "user") -> str:
        expire = datetime.now(timezone.utc) + self.expire_delta
        payload = {
            "sub": entity_id,
            "email": email,
            "kind": kind,
            "exp": expire.isoformat(),
        }
        payload_b64 = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode()
        return f"{payload_b64}.{self._sign(payload_b64)}"

    def verify(self, token: str) -> Optional[TokenClaims]:
        """校验签名与有效期，失败返回 ``None``。"""
        parts = token.split(".")
        if len(parts) != 2:
            return None
        payload_b64, signature = parts
        if not hmac.compare_digest(signature, self._sign(payload_b64)):
            return None
        try:
            payload = json.loads(base64.urlsafe_b64decode(payload_b64.encode()).decode())
            exp = datetime.fromisoformat(payload["exp"])
            claims = TokenClaims(
                entity_id=payload["sub"],
                email=payload["email"],
                kind=payload.get("kind", "user"),
                expires_at=exp,
            )
        except (ValueError, KeyError, TypeError):
            return None
        # 检查过期
        if datetime.now(timezone.utc) > claims.expires_at:
            return None
        return claims

    def _sign(self, payload_b64: str) -> str:
        return hmac.new(self.secret_key.encode(), payload_b64.encode(), hashlib.sha256).hexdigest()
