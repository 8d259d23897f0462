"""Guest vs. registered account identity.

The ``users`` table stores both kinds of account in one row shape, which
would allow a guest with a password or a registered user with a nickname.
Writes go through these variants instead, so the column values always
agree with the ``is_guest`` flag.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Union


@dataclass(frozen=True)
class Guest:
    nickname: Optional[str]


@dataclass(frozen=True)
class Registered:
    password_hash: str

    def __post_init__(self):
        if not self.password_hash:
            raise ValueError('Registered accounts need a password hash')


Identity = Union[Guest, Registered]


def identity_columns(identity: Identity) -> Dict[str, object]:
    """Column values (by attribute name) that persist ``identity`` on a user row."""
    if isinstance(identity, Guest):
        return {'is_guest': True, 'nickname': identity.nickname, 'password_hash': None}
    if isinstance(identity, Registered):
        return {'is_guest': False, 'nickname': None, 'password_hash': identity.password_hash}
    raise TypeError(f'Unknown identity: {identity!r}')
