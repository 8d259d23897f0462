import re

from minigame import bcrypt
from minigame.errors import ValidationError

USERNAME_MIN, USERNAME_MAX = 3, 20
NICKNAME_MIN, NICKNAME_MAX = 2, 20
PASSWORD_MIN, PASSWORD_MAX = 6, 128
_USERNAME_RE = re.compile(r'^[A-Za-z0-9_.-]+$')


def validate_username(username) -> str:
    if not isinstance(username, str) or not username.strip():
        raise ValidationError('Username is required')
    username = username.strip()
    if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        raise ValidationError(f'Username must be {USERNAME_MIN}-{USERNAME_MAX} characters long')
    if not _USERNAME_RE.match(username):
        raise ValidationError('Username may only contain letters, digits, ".", "_" and "-"')
    return username


def validate_nickname(nickname) -> str:
    if not isinstance(nickname, str):
        raise ValidationError('Nickname is required')
    nickname = nickname.strip()
    if not NICKNAME_MIN <= len(nickname) <= NICKNAME_MAX:
        raise ValidationError(f'Nickname must be {NICKNAME_MIN}-{NICKNAME_MAX} characters long')
    return nickname


def validate_password(password, field='Password') -> str:
    if not isinstance(password, str) or not password:
        raise ValidationError(f'{field} is required')
    if len(password) < PASSWORD_MIN:
        raise ValidationError(f'{field} must be at least {PASSWORD_MIN} characters long')
    if len(password) > PASSWORD_MAX:
        raise ValidationError(f'{field} must be at most {PASSWORD_MAX} characters long')
    return password


def hash_password(password: str) -> str:
    return bcrypt.generate_password_hash(password).decode('utf-8')


def check_password(password_hash, password) -> bool:
    if not password_hash or not isinstance(password, str):
        return False
    return bcrypt.check_password_hash(password_hash, password)
