from typing import Any, Dict, Optional

GAME_MASTER = 'Game Master'
TRAITOR = 'Traitor'
CITIZEN = 'Citizen'

ADMIN = 'admin'

GHOST_NAME = 'No Traitor'

# Session status values
IDLE = 'idle'
ROLE = 'role'
WORD = 'word'
IN_PROGRESS = 'in_progress'
VOTE1 = 'vote1'
VOTE2 = 'vote2'
END = 'end'


class Player:
    """One participant of the session.

    The ghost player (``is_ghost=True``) stands for "no Traitor this round":
    it is hidden from the visible roster but can be accused in round 2.
    """

    def __init__(self, name: str, permission: Optional[str] = None, is_ghost: bool = False):
        self.name = name
        self.role = CITIZEN
        self.vote1: Any = None
        self.vote2: Optional[str] = None
        self.vote_count2 = 0
        self.is_ghost = is_ghost
        self.permission = permission

    @property
    def is_admin(self) -> bool:
        return self.permission == ADMIN

    def reset(self) -> None:
        self.role = CITIZEN
        self.vote1 = None
        self.vote2 = None
        self.vote_count2 = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'role': self.role,
            'vote1': self.vote1,
            'vote2': self.vote2,
            'vote_count2': self.vote_count2,
            'is_ghost': self.is_ghost,
            'permission': self.permission,
        }

    def __repr__(self) -> str:
        return f"<Player {self.name!r} role={self.role!r}>"


def make_ghost() -> Player:
    return Player(GHOST_NAME, is_ghost=True)
