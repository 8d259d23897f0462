import secrets
import string
from datetime import datetime, timedelta
from typing import Optional

from flask import current_app
from sqlalchemy import delete, select, update

from minigame import clock
from minigame.errors import ConflictError, NotFoundError
from minigame.models import User
from minigame.services.persistence import unit_of_work
from .credentials import hash_password, validate_nickname, validate_password, validate_username
from .identity import Guest, Registered, identity_columns

USERNAME_TAKEN = 'Username already taken'
GUEST_USERNAME_ATTEMPTS = 5
_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_guest_username(now: datetime, prefix: Optional[str] = None) -> str:
    """Synthetic guest username: prefix, epoch milliseconds, random suffix."""
    if prefix is None:
        prefix = current_app.config.get('GUEST_USERNAME_PREFIX', 'guest_')
    millis = int((now - datetime(1970, 1, 1)).total_seconds() * 1000)
    suffix = ''.join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
    return f"{prefix}{millis}_{suffix}"


def create_guest(nickname, ip_address: str, now: Optional[datetime] = None) -> User:
    """Create a passwordless guest account and return it.

    The unique constraint on ``users.username`` decides collisions; a losing
    insert is retried with a fresh random suffix.
    """
    nickname = validate_nickname(nickname)
    now = clock.as_naive_utc(now) if now else clock.utcnow()
    for attempt in range(1, GUEST_USERNAME_ATTEMPTS + 1):
        username = generate_guest_username(now)
        if User.query.filter_by(username=username).first():
            continue
        guest = User(username=username, ip_address=ip_address or '', created_at=now, coins=0)
        guest.apply_identity(Guest(nickname=nickname))
        try:
            with unit_of_work('create guest', conflict=USERNAME_TAKEN) as session:
                session.add(guest)
        except ConflictError:
            current_app.logger.info(f"[guest-create] username collision on attempt {attempt}, retrying")
            continue
        current_app.logger.info(f"[guest-create] user={guest.id} username={guest.username}")
        return guest
    raise ConflictError('Could not allocate a guest username, please try again')


def upgrade_guest(user_id: int, username, password) -> User:
    """Turn a guest into a registered account (one way).

    The update is conditioned on the row still being a guest at execution
    time, so a concurrent sweep or a second upgrade cannot interleave with it.
    On any failure the guest row is left as it was.
    """
    username = validate_username(username)
    password = validate_password(password)
    if User.query.filter(User.username == username).first():
        raise ConflictError(USERNAME_TAKEN)

    values = {'username': username}
    values.update(identity_columns(Registered(password_hash=hash_password(password))))
    stmt = (
        update(User)
        .where(User.id == user_id, User.is_guest.is_(True))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    with unit_of_work('upgrade guest', conflict=USERNAME_TAKEN) as session:
        result = session.execute(stmt)
        if result.rowcount == 0:
            existing = session.execute(select(User.id).where(User.id == user_id)).first()
            if existing is None:
                raise NotFoundError('Account no longer exists')
            raise ConflictError('Account is already registered')

    user = User.query.filter_by(id=user_id).first()
    if user is None:
        raise NotFoundError('Account no longer exists')
    current_app.logger.info(f"[upgrade] user={user_id} is now registered as {username}")
    return user


def sweep_expired_guests(now: Optional[datetime] = None, retention: Optional[timedelta] = None) -> int:
    """Delete guest accounts created before ``now - retention``.

    Registered accounts are never matched, whatever their age. Score rows
    of deleted guests are kept.
    """
    now = clock.as_naive_utc(now) if now else clock.utcnow()
    if retention is None:
        retention = timedelta(days=int(current_app.config.get('GUEST_RETENTION_DAYS', 7)))
    cutoff = now - retention
    stmt = (
        delete(User)
        .where(User.is_guest.is_(True), User.created_at < cutoff)
        .execution_options(synchronize_session=False)
    )
    with unit_of_work('sweep guests') as session:
        removed = session.execute(stmt).rowcount or 0
    current_app.logger.info(f"[sweep] removed={removed} cutoff={cutoff.isoformat()}")
    return removed
