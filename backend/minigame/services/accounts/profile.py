from flask import current_app

from minigame.errors import ValidationError
from minigame.models import User
from minigame.services.persistence import unit_of_work

AVATAR_PREFIX = 'data:image/'


def update_avatar(user: User, avatar) -> User:
    """Store an avatar given as an image data URL."""
    if not isinstance(avatar, str) or not avatar.startswith(AVATAR_PREFIX):
        raise ValidationError('Invalid avatar format')
    limit = int(current_app.config.get('MAX_AVATAR_LENGTH', 5000000))
    if len(avatar) > limit:
        raise ValidationError('Avatar is too large')
    with unit_of_work('update avatar'):
        user.avatar = avatar
    return user

