"""Per-game leaderboards over the append-only ``scores`` table.

Each user appears at most once, with their best score inside the window.
Windows are evaluated in UTC:

- ``daily``: rows stamped on the current UTC calendar day
- ``weekly``: rows stamped within the trailing seven days
- ``alltime``: every row

Ordering is score descending, then the id of the user's best row (the
earliest one when the best score was reached more than once).
"""
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy import and_, func, select

from minigame import clock
from minigame.errors import ValidationError
from minigame.models import Score, User
from minigame.services.persistence import reading

WINDOWS = ('daily', 'weekly', 'alltime')
GAME_ID_RE = re.compile(r'^[A-Za-z0-9_-]{1,64}$')


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    user_id: int
    username: str
    avatar: Optional[str]
    is_guest: bool
    score: int
    created_at: datetime

    def to_dict(self):
        return {
            'rank': self.rank,
            'user_id': self.user_id,
            'username': self.username,
            'avatar': self.avatar,
            'is_guest': self.is_guest,
            'score': self.score,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


def validate_game(game) -> str:
    if not isinstance(game, str) or not GAME_ID_RE.match(game):
        raise ValidationError('Invalid game identifier')
    return game


def window_bounds(window: str, now: datetime) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Inclusive lower / exclusive upper ``created_at`` bounds for a window."""
    if window == 'daily':
        start = datetime(now.year, now.month, now.day)
        return start, start + timedelta(days=1)
    if window == 'weekly':
        return now - timedelta(days=7), None
    if window == 'alltime':
        return None, None
    raise ValidationError(f"Unknown leaderboard window '{window}' (expected one of: {', '.join(WINDOWS)})")


def get_leaderboard(game, window: str, now: Optional[datetime] = None, limit: Optional[int] = None) -> List[LeaderboardEntry]:
    game = validate_game(game)
    now = clock.as_naive_utc(now) if now else clock.utcnow()
    if limit is None:
        limit = int(current_app.config.get('LEADERBOARD_LIMIT', 100))
    start, end = window_bounds(window, now)

    filters = [Score.game == game]
    if start is not None:
        filters.append(Score.created_at >= start)
    if end is not None:
        filters.append(Score.created_at < end)

    # Best score per user inside the window
    best = (
        select(Score.user_id.label('user_id'), func.max(Score.score).label('best'))
        .where(*filters)
        .group_by(Score.user_id)
        .subquery('best')
    )
    # The earliest row holding that best score
    best_row = (
        select(func.min(Score.id).label('score_id'))
        .select_from(Score)
        .join(best, and_(Score.user_id == best.c.user_id, Score.score == best.c.best))
        .where(*filters)
        .group_by(Score.user_id)
        .subquery('best_row')
    )
    # Inner join on users drops rows orphaned by the guest sweep
    stmt = (
        select(Score, User)
        .select_from(Score)
        .join(best_row, Score.id == best_row.c.score_id)
        .join(User, User.id == Score.user_id)
        .order_by(Score.score.desc(), Score.id.asc())
        .limit(limit)
    )

    with reading('leaderboard') as session:
        rows = session.execute(stmt).all()

    return [
        LeaderboardEntry(
            rank=index,
            user_id=user.id,
            username=user.display_name,
            avatar=user.avatar,
            is_guest=bool(user.is_guest),
            score=score.score,
            created_at=score.created_at,
        )
        for index, (score, user) in enumerate(rows, start=1)
    ]
