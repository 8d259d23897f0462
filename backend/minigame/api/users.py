from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from minigame.services.accounts.profile import update_avatar
from minigame.services.accounts.registration import change_password, change_username

users = Blueprint('users', __name__)


@users.route('/profile', methods=['GET'])
@login_required
def get_profile():
    return jsonify(current_user.to_dict())


@users.route('/avatar', methods=['POST'])
@login_required
def set_avatar():
    data = request.get_json(silent=True) or {}
    update_avatar(current_user._get_current_object(), data.get('avatar'))
    return jsonify({'message': 'Avatar saved'})


@users.route('/username', methods=['PUT'])
@login_required
def set_username():
    data = request.get_json(silent=True) or {}
    user = change_username(current_user._get_current_object(), data.get('newUsername'))
    return jsonify({'message': 'Username changed', 'username': user.username})


@users.route('/password', methods=['PUT'])
@login_required
def set_password():
    data = request.get_json(silent=True) or {}
    change_password(current_user._get_current_object(), data.get('oldPassword'), data.get('newPassword'))
    return jsonify({'message': 'Password changed'})
