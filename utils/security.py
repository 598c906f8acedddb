"""
utils/security.py

- Bearer 토큰 발급/검증 (itsdangerous 서명 + 발급 시각)
- 서명 키는 settings.AUTH_SECRET_KEY, 유효 시간은 settings.AUTH_TOKEN_TTL_MINUTES
"""

from typing import Optional

from itsdangerous import BadData, SignatureExpired, URLSafeTimedSerializer

from config.settings import settings

TOKEN_SALT = "access-token"


class InvalidToken(Exception):
    """형식 오류, 서명 불일치, 만료 모두 이 예외로 처리"""


def _serializer() -> URLSafeTimedSerializer:
    # 설정이 테스트 등에서 바뀌어도 반영되도록 매번 생성
    return URLSafeTimedSerializer(settings.AUTH_SECRET_KEY, salt=TOKEN_SALT)


def create_access_token(user_id: int) -> str:
    return _serializer().dumps({"uid": user_id})


def decode_access_token(token: str, ttl_minutes: Optional[int] = None) -> int:
    """검증 후 user_id 반환"""
    ttl = settings.AUTH_TOKEN_TTL_MINUTES if ttl_minutes is None else ttl_minutes
    try:
        payload = _serializer().loads(token.strip(), max_age=ttl * 60)
    except SignatureExpired:
        raise InvalidToken("Token expired")
    except BadData:
        raise InvalidToken("Invalid token")

    try:
        return int(payload["uid"])
    except (KeyError, TypeError, ValueError):
        raise InvalidToken("Malformed token payload")
