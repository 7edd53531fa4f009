from typing import Any, Dict, List

from insider.models import GAME_MASTER, TRAITOR, Player

UP_VOTES = ('1', 1)


def tally_vote1(players: List[Player]) -> Dict[str, int]:
    """Count "word found" votes.

    ``'1'`` and ``1`` count as up, any other cast value as down. Missing
    votes and the ghost player are ignored.
    """
    result = {'up': 0, 'down': 0}
    for player in players:
        if player.is_ghost or player.vote1 is None:
            continue
        # bool is an int subclass; True == 1 must not count as up
        if player.vote1 in UP_VOTES and not isinstance(player.vote1, bool):
            result['up'] += 1
        else:
            result['down'] += 1
    return result


def count_accusations(players: List[Player]) -> None:
    by_name = {p.name: p for p in players}
    for player in players:
        player.vote_count2 = 0
    for player in players:
        if not player.vote2:
            continue
        target = by_name.get(player.vote2)
        if target is not None:
            target.vote_count2 += 1


def tally_vote2(players: List[Player]) -> Dict[str, Any]:
    """Count accusations and decide whether the Traitor was caught.

    Candidates are every player except the Game Master, ghost included,
    ranked by accusations received. ``sorted`` is stable, so equal counts
    keep roster order. The Traitor is caught only with a strict plurality.
    """
    count_accusations(players)
    ranked = sorted(
        (p for p in players if p.role != GAME_MASTER),
        key=lambda p: p.vote_count2,
        reverse=True,
    )
    top = ranked[0] if ranked else None
    runner_up = ranked[1] if len(ranked) > 1 else None
    ghost = next((p for p in players if p.is_ghost), None)

    has_won = bool(top and top.role == TRAITOR) and (
        runner_up is None or runner_up.vote_count2 < top.vote_count2
    )
    has_traitor = ghost is None or ghost.role != TRAITOR
    return {
        'has_won': has_won,
        'vote_detail': ranked,
        'has_traitor': has_traitor,
    }
