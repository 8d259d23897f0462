from flask import current_app

from minigame.errors import AuthenticationError, ConflictError, ForbiddenError, ValidationError
from minigame.models import User
from minigame.services.persistence import unit_of_work
from .credentials import check_password, hash_password, validate_password, validate_username
from .guests import USERNAME_TAKEN
from .identity import Registered


def register_user(username, password, ip_address: str) -> User:
    username = validate_username(username)
    password = validate_password(password)
    if User.query.filter_by(username=username).first():
        raise ConflictError(USERNAME_TAKEN)

    user = User(username=username, ip_address=ip_address or '', coins=0)
    user.apply_identity(Registered(password_hash=hash_password(password)))
    with unit_of_work('register user', conflict=USERNAME_TAKEN) as session:
        session.add(user)
    current_app.logger.info(f"[register] user={user.id} username={user.username}")
    return user


def authenticate(username, password) -> User:
    if not isinstance(username, str) or not username.strip() or not isinstance(password, str) or not password:
        raise AuthenticationError('Username and password are required')
    user = User.query.filter_by(username=username.strip()).first()
    if user is None:
        raise AuthenticationError('Invalid username or password')
    if user.is_guest:
        raise AuthenticationError('Guest accounts cannot log in with a password')
    if not check_password(user.password_hash, password):
        current_app.logger.info(f"[auth] failed password check for user={user.id}")
        raise AuthenticationError('Invalid username or password')
    return user


def change_username(user: User, new_username) -> User:
    if user.is_guest:
        raise ForbiddenError('Guest accounts must be upgraded before choosing a username')
    new_username = validate_username(new_username)
    if new_username == user.username:
        return user
    if User.query.filter(User.username == new_username, User.id != user.id).first():
        raise ConflictError(USERNAME_TAKEN)
    old_username = user.username
    with unit_of_work('change username', conflict=USERNAME_TAKEN):
        user.username = new_username
    current_app.logger.info(f"[profile] user={user.id} renamed {old_username} -> {new_username}")
    return user


def change_password(user: User, old_password, new_password) -> User:
    if user.is_guest:
        raise ForbiddenError('Guest accounts have no password to change')
    if not check_password(user.password_hash, old_password):
        raise ValidationError('Current password is incorrect')
    new_password = validate_password(new_password, field='New password')
    with unit_of_work('change password'):
        user.apply_identity(Registered(password_hash=hash_password(new_password)))
    current_app.logger.info(f"[profile] user={user.id} changed password")
    return user
