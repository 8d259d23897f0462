"""Bearer-token sessions.

Tokens are itsdangerous ``URLSafeTimedSerializer`` payloads signed with the
app ``SECRET_KEY``. The signer embeds the issue time; expiry is checked here
against ``clock.utcnow()`` so that tests can move the clock. Guest sessions
expire sooner than registered ones.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from flask import current_app
from itsdangerous import BadData, URLSafeTimedSerializer

from minigame import clock, db
from minigame.errors import AuthenticationError
from minigame.models import User

SESSION_SALT = 'minigame-session'


@dataclass(frozen=True)
class SessionClaims:
    user_id: int
    username: str
    is_guest: bool
    issued_at: datetime


@dataclass(frozen=True)
class IssuedSession:
    token: str
    expires_in: int  # seconds


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=SESSION_SALT)


def session_ttl(is_guest: bool) -> timedelta:
    cfg = current_app.config
    if is_guest:
        return timedelta(hours=int(cfg.get('GUEST_SESSION_TTL_HOURS', 24)))
    return timedelta(hours=int(cfg.get('SESSION_TTL_HOURS', 168)))


def issue_token(user: User) -> IssuedSession:
    payload = {'uid': user.id, 'username': user.username, 'guest': bool(user.is_guest)}
    token = _serializer().dumps(payload)
    ttl = session_ttl(bool(user.is_guest))
    return IssuedSession(token=token, expires_in=int(ttl.total_seconds()))


def verify_token(token: str, now: Optional[datetime] = None) -> SessionClaims:
    """Return the claims of a valid token; anything else is ``AuthenticationError``."""
    if not token:
        raise AuthenticationError('Missing token')
    try:
        payload, issued_at = _serializer().loads(token, return_timestamp=True)
    except BadData:
        raise AuthenticationError('Invalid token')

    if not isinstance(payload, dict):
        raise AuthenticationError('Invalid token')
    user_id = payload.get('uid')
    username = payload.get('username')
    is_guest = payload.get('guest')
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(username, str) or not isinstance(is_guest, bool):
        raise AuthenticationError('Invalid token')

    issued_at = clock.as_naive_utc(issued_at)
    now = clock.as_naive_utc(now) if now else clock.utcnow()
    if now - issued_at > session_ttl(is_guest):
        raise AuthenticationError('Token expired')
    return SessionClaims(user_id=user_id, username=username, is_guest=is_guest, issued_at=issued_at)


def load_user_from_header(header: str) -> Optional[User]:
    """Flask-Login request loader body: ``Authorization: Bearer <token>`` to a user."""
    scheme, _, token = (header or '').partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    try:
        claims = verify_token(token.strip())
    except AuthenticationError as exc:
        current_app.logger.info(f"[auth] rejected bearer token: {exc.message}")
        return None
    user = db.session.get(User, claims.user_id)
    if user is None:
        # Typically a guest removed by the sweep after the token was issued
        current_app.logger.info(f"[auth] token for missing user={claims.user_id}")
        return None
    if user.is_guest and not claims.is_guest:
        current_app.logger.warning(f"[auth] registered token presented for guest user={user.id}")
        return None
    return user
