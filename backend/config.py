import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///minigame.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Avatars arrive as data URLs inside JSON bodies
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', str(10 * 1024 * 1024)))
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:3000,http://127.0.0.1:3000',
    ).split(',') if o.strip()]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', '12'))
    # Session lifetimes (hours)
    SESSION_TTL_HOURS = int(os.environ.get('SESSION_TTL_HOURS', '168'))
    GUEST_SESSION_TTL_HOURS = int(os.environ.get('GUEST_SESSION_TTL_HOURS', '24'))
    # Guest lifecycle
    GUEST_RETENTION_DAYS = int(os.environ.get('GUEST_RETENTION_DAYS', '7'))
    GUEST_SWEEP_INTERVAL_SEC = int(os.environ.get('GUEST_SWEEP_INTERVAL_SEC', '86400'))
    GUEST_USERNAME_PREFIX = os.environ.get('GUEST_USERNAME_PREFIX', 'guest_')
    # Scores and leaderboards
    LEADERBOARD_LIMIT = int(os.environ.get('LEADERBOARD_LIMIT', '100'))
    MAX_SCORE = int(os.environ.get('MAX_SCORE', '10000000'))
    COIN_DIVISOR = int(os.environ.get('COIN_DIVISOR', '10'))
    MAX_AVATAR_LENGTH = int(os.environ.get('MAX_AVATAR_LENGTH', '5000000'))
