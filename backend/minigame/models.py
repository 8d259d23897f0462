from minigame import db
from minigame import clock
from minigame.services.accounts.identity import Guest, Registered, identity_columns
from flask_login import UserMixin

def _utcnow():
    return clock.utcnow()

class User(UserMixin, db.Model):
    __tablename__ = 'users'
    # AUTOINCREMENT keeps SQLite from handing a purged guest's id to a new
    # account, which would adopt the guest's orphaned scores
    __table_args__ = {'sqlite_autoincrement': True}
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    nickname = db.Column(db.String(32), nullable=True)
    password_hash = db.Column('password', db.String(256), nullable=True)
    avatar = db.Column(db.Text, nullable=True)
    coins = db.Column(db.Integer, nullable=False, default=0, server_default='0')
    ip_address = db.Column(db.String(64), nullable=False, default='')
    is_guest = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false(), index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow, index=True)

    @property
    def identity(self):
        if self.is_guest:
            return Guest(nickname=self.nickname)
        return Registered(password_hash=self.password_hash)

    def apply_identity(self, identity):
        for column, value in identity_columns(identity).items():
            setattr(self, column, value)

    @property
    def display_name(self):
        if self.is_guest and self.nickname:
            return self.nickname
        return self.username

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'nickname': self.nickname,
            'display_name': self.display_name,
            'coins': self.coins or 0,
            'avatar': self.avatar,
            'is_guest': bool(self.is_guest),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

class Score(db.Model):
    __tablename__ = 'scores'
    id = db.Column(db.Integer, primary_key=True)
    # References users.id. No FK constraint: score rows outlive the guests
    # sweep_expired_guests deletes, also on engines that enforce FKs
    user_id = db.Column(db.Integer, nullable=False, index=True)
    game = db.Column(db.String(64), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow, index=True)
