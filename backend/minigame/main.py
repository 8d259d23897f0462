from flask import Blueprint, jsonify

from minigame import clock

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Minigame Party server!'})

@main.route('/api/health')
def health():
    return jsonify({'status': 'ok', 'timestamp': clock.utcnow().isoformat() + 'Z'})
