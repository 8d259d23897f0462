from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from minigame.services.accounts.guests import create_guest, upgrade_guest
from minigame.services.accounts.registration import authenticate, register_user
from minigame.services.accounts.sessions import issue_token

auth = Blueprint('auth', __name__)


def _session_payload(user, message):
    issued = issue_token(user)
    return {
        'token': issued.token,
        'expires_in': issued.expires_in,
        'userId': user.id,
        'username': user.username,
        'nickname': user.nickname,
        'coins': user.coins or 0,
        'isGuest': bool(user.is_guest),
        'message': message,
    }


@auth.route('/guest-login', methods=['POST'])
def guest_login():
    data = request.get_json(silent=True) or {}
    guest = create_guest(data.get('nickname'), request.remote_addr)
    return jsonify(_session_payload(guest, 'Logged in as guest')), 201


@auth.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    user = register_user(data.get('username'), data.get('password'), request.remote_addr)
    return jsonify(_session_payload(user, 'Registration successful')), 201


@auth.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = authenticate(data.get('username'), data.get('password'))
    return jsonify(_session_payload(user, 'Logged in successfully'))


@auth.route('/upgrade', methods=['POST'])
@login_required
def upgrade():
    """Convert the calling guest into a registered account and re-issue its token."""
    data = request.get_json(silent=True) or {}
    user = upgrade_guest(current_user.id, data.get('username'), data.get('password'))
    return jsonify(_session_payload(user, 'Account upgraded'))
