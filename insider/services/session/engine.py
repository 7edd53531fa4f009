import logging
import random
import time
import unicodedata
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from insider.models import (
    ADMIN, CITIZEN, GAME_MASTER, TRAITOR,
    IDLE, ROLE, WORD, IN_PROGRESS, VOTE1, VOTE2, END,
    Player, make_ghost,
)
from .countdown import Countdown, start_thread
from .tally import tally_vote1, tally_vote2


def collation_key(name: str) -> str:
    """Case- and accent-insensitive sort key, so "Hélène" sorts with "Helene"."""
    decomposed = unicodedata.normalize('NFKD', name)
    return ''.join(c for c in decomposed if not unicodedata.combining(c)).casefold()


class SessionEngine:
    """In-memory authority for one game session.

    Owns the roster, roles, secret word, votes and the discussion countdown.
    Every public operation is tolerant: unknown names, blank input or an
    empty word list degrade to a no-op or an empty value instead of raising.
    Run one engine per game; engines share no state.
    """

    def __init__(
        self,
        word_list: Iterable[str] = (),
        traitor_optional: bool = True,
        initial_players: Iterable[Tuple[str, bool]] = (),
        countdown_seconds: int = 300,
        countdown_interval: float = 1.0,
        start_background_task: Callable = start_thread,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.word_list = tuple(w for w in word_list if w and w.strip())
        self.traitor_optional = traitor_optional
        self.logger = logger or logging.getLogger(__name__)
        self.rng = rng or random.Random()
        self.countdown = Countdown(
            seconds=countdown_seconds,
            interval=countdown_interval,
            start_background_task=start_background_task,
            sleep=sleep,
            logger=self.logger,
        )

        self.players: List[Player] = []
        self.online_count = 0
        self.word = ''
        self.status = IDLE
        self.result_vote1: Optional[Dict[str, int]] = None
        self.result_vote2: Optional[Dict[str, Any]] = None

        for name, is_admin in initial_players:
            self.add_player(name, is_admin)

    # ---- Roster ----

    def get_player(self, name) -> Optional[Player]:
        return next((p for p in self.players if p.name == name), None)

    def get_visible_players(self) -> List[Player]:
        return [p for p in self.players if not p.is_ghost]

    def get_ghost_player(self) -> Optional[Player]:
        return next((p for p in self.players if p.is_ghost), None)

    def add_player(self, name, is_admin: bool = False) -> None:
        """Add a fresh Citizen, replacing any player with the same name."""
        cleaned = name.strip() if isinstance(name, str) else ''
        if not cleaned:
            return
        self.players = [p for p in self.players if p.name != cleaned]
        self.players.append(Player(cleaned, permission=ADMIN if is_admin else None))
        self.logger.info(f"[player-add] name={cleaned} admin={bool(is_admin)}")

    def delete_player(self, name) -> None:
        before = len(self.players)
        self.players = [p for p in self.players if p.name != name]
        if len(self.players) != before:
            self.logger.info(f"[player-delete] name={name}")

    # ---- Presence ----

    def get_player_status(self) -> Dict[str, int]:
        offline = max(len(self.get_visible_players()) - self.online_count, 0)
        return {'online': self.online_count, 'offline': offline}

    def track_online(self) -> Dict[str, int]:
        self.online_count += 1
        return self.get_player_status()

    def track_offline(self) -> Dict[str, int]:
        self.online_count = max(0, self.online_count - 1)
        return self.get_player_status()

    # ---- Word ----

    def choose_random_word(self) -> str:
        if not self.word_list:
            self.logger.warning("[word] word list is empty; no word chosen")
            return ''
        return self.rng.choice(self.word_list).strip()

    def set_word(self, value=None) -> str:
        if isinstance(value, str) and value.strip():
            self.word = value.strip()
            self.logger.info("[word] source=override")
        else:
            self.word = self.choose_random_word()
            self.logger.info("[word] source=list")
        return self.word

    # ---- Roles ----

    def shuffle(self, source: List[Player]) -> List[Player]:
        """Fisher-Yates shuffle of a copy of ``source``."""
        items = list(source)
        for i in range(len(items) - 1, 0, -1):
            j = int(self.rng.random() * (i + 1))
            items[i], items[j] = items[j], items[i]
        return items

    @staticmethod
    def assign_role(role: str, candidates: List[Player]) -> Optional[Player]:
        player = next((p for p in candidates if p.role == CITIZEN), None)
        if player is not None:
            player.role = role
        return player

    def reset_game_state(self) -> None:
        self.stop_countdown()
        self.players = [p for p in self.players if not p.is_ghost]
        for player in self.players:
            player.reset()
        self.word = ''
        self.status = IDLE
        self.result_vote1 = None
        self.result_vote2 = None

    def add_ghost_player_if_needed(self) -> None:
        if not self.traitor_optional or self.get_ghost_player():
            return
        self.players.append(make_ghost())

    def randomize_roles(self) -> List[Player]:
        """Deal a Game Master and a Traitor, then re-sort the roster.

        Returns the roster: humans alphabetically, ghost last.
        """
        self.reset_game_state()

        game_master = self.assign_role(GAME_MASTER, self.shuffle(self.get_visible_players()))
        self.add_ghost_player_if_needed()
        candidates = [p for p in self.players if not p.is_ghost and p.role == CITIZEN]
        traitor = self.assign_role(TRAITOR, self.shuffle(candidates))

        self.players.sort(key=lambda p: (p.is_ghost, collation_key(p.name), p.name))
        self.logger.info(
            f"[roles] players={len(self.get_visible_players())} "
            f"game_master={game_master.name if game_master else None} "
            f"traitor_dealt={traitor is not None} ghost={self.get_ghost_player() is not None}"
        )
        return self.players

    # ---- Votes ----

    def reset_votes(self, vote_number: int) -> None:
        for player in self.players:
            if vote_number == 1:
                player.vote1 = None
            elif vote_number == 2:
                player.vote2 = None
                player.vote_count2 = 0

    def record_vote(self, vote_number: int, player_name, value) -> None:
        player = self.get_player(player_name)
        if player is None:
            return
        if vote_number == 1:
            player.vote1 = value
        elif vote_number == 2:
            player.vote2 = value

    def everyone_has_voted(self, vote_number: int) -> bool:
        for player in self.players:
            if player.is_ghost:
                continue
            if vote_number == 1:
                vote = player.vote1
            elif vote_number == 2:
                vote = player.vote2
            else:
                return False
            if vote is None:
                return False
        return True

    def tally_vote1(self) -> Dict[str, int]:
        self.result_vote1 = tally_vote1(self.players)
        self.logger.info(f"[vote1-tally] up={self.result_vote1['up']} down={self.result_vote1['down']}")
        return self.result_vote1

    def tally_vote2(self) -> Dict[str, Any]:
        result = tally_vote2(self.players)
        result['vote_detail'] = [p.to_dict() for p in result['vote_detail']]
        self.result_vote2 = result
        self.logger.info(f"[vote2-tally] has_won={result['has_won']} has_traitor={result['has_traitor']}")
        return result

    # ---- Countdown ----

    @property
    def countdown_active(self) -> bool:
        return self.countdown.active

    def start_countdown(self, on_tick: Callable[[int], None]) -> None:
        self.countdown.start(on_tick)

    def stop_countdown(self) -> None:
        self.countdown.stop()

    # ---- Phase transitions ----

    def _set_status(self, status: str) -> None:
        self.logger.info(f"[status] {self.status} -> {status}")
        self.status = status

    def reset_game(self) -> List[Player]:
        players = self.randomize_roles()
        self.set_word('')
        self._set_status(ROLE)
        return players

    def reveal_word(self) -> Dict[str, Any]:
        self._set_status(WORD)
        return {'players': [p.to_dict() for p in self.players], 'word': self.word}

    def start_round(self, on_tick: Callable[[int], None]) -> None:
        self.stop_countdown()
        self._set_status(IN_PROGRESS)
        self.start_countdown(on_tick)

    def word_found(self) -> None:
        self.stop_countdown()
        self._set_status(VOTE1)

    def display_vote(self, vote_number: int) -> Optional[List[Player]]:
        """Open a voting round; round 2 returns the accusation candidates."""
        self.reset_votes(vote_number)
        if vote_number == 1:
            self._set_status(VOTE1)
            return None
        if vote_number == 2:
            self._set_status(VOTE2)
            return [p for p in self.players if p.role != GAME_MASTER]
        return None

    def submit_vote(self, vote_number: int, player_name, value) -> Optional[Dict[str, Any]]:
        """Record a vote and close the round once every player has voted.

        Returns the tally when the round closes, ``None`` otherwise.
        """
        if vote_number not in (1, 2):
            return None
        self.record_vote(vote_number, player_name, value)
        if not self.everyone_has_voted(vote_number):
            return None
        if vote_number == 1:
            result = self.tally_vote1()
            self._set_status(VOTE2)
            return result
        result = self.tally_vote2()
        self._set_status(END)
        return result
