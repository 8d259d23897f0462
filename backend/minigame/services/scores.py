from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from flask import current_app
from sqlalchemy import select, update

from minigame import clock
from minigame.errors import NotFoundError, ValidationError
from minigame.models import Score, User
from minigame.services.leaderboard import validate_game
from minigame.services.persistence import unit_of_work


@dataclass(frozen=True)
class ScoreReceipt:
    score: Score
    coins_awarded: int
    coins: int

    def to_dict(self):
        return {
            'message': 'Score saved',
            'game': self.score.game,
            'score': self.score.score,
            'coins': self.coins_awarded,
            'coin_balance': self.coins,
        }


def coins_for(score: int) -> int:
    divisor = int(current_app.config.get('COIN_DIVISOR', 10)) or 10
    return score // divisor


def submit_score(user_id: int, game, score, now: Optional[datetime] = None) -> ScoreReceipt:
    """Append a score row and credit ``score // COIN_DIVISOR`` coins in one transaction."""
    game = validate_game(game)
    if not isinstance(score, int) or isinstance(score, bool):
        raise ValidationError('Score must be an integer')
    max_score = int(current_app.config.get('MAX_SCORE', 10000000))
    if not 0 <= score <= max_score:
        raise ValidationError(f'Score must be between 0 and {max_score}')
    now = clock.as_naive_utc(now) if now else clock.utcnow()
    awarded = coins_for(score)

    row = Score(user_id=user_id, game=game, score=score, created_at=now)
    with unit_of_work('submit score') as session:
        credited = session.execute(
            update(User)
            .where(User.id == user_id)
            .values(coins=User.coins + awarded)
            .execution_options(synchronize_session=False)
        )
        if credited.rowcount == 0:
            raise NotFoundError('Account no longer exists')
        session.add(row)
        balance = session.execute(select(User.coins).where(User.id == user_id)).scalar_one()

    current_app.logger.info(f"[score] user={user_id} game={game} score={score} coins=+{awarded}")
    return ScoreReceipt(score=row, coins_awarded=awarded, coins=balance)
