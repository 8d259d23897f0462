from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from minigame.services.leaderboard import get_leaderboard
from minigame.services.scores import submit_score

scores = Blueprint('scores', __name__)


@scores.route('/scores', methods=['POST'])
@login_required
def post_score():
    data = request.get_json(silent=True) or {}
    receipt = submit_score(current_user.id, data.get('game'), data.get('score'))
    return jsonify(receipt.to_dict())


@scores.route('/leaderboard/<string:game>/<string:window>', methods=['GET'])
def leaderboard(game, window):
    entries = get_leaderboard(game, window)
    return jsonify([e.to_dict() for e in entries])
