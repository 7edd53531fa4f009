from flask_socketio import join_room, emit
from flask import request, session
from typing import Dict, Any

from insider import socketio, get_engine

NAMESPACE = '/ws'
ROOM = 'game'

# Connections that announced themselves through `new_player`
_announced_sids: Dict[str, bool] = {}


def _get_sid() -> str:
    return request.sid  # type: ignore


def _broadcast(event: str, data: Any = None) -> None:
    # socketio.emit works from background tasks as well as handlers
    if data is None:
        socketio.emit(event, to=ROOM, namespace=NAMESPACE)
    else:
        socketio.emit(event, data, to=ROOM, namespace=NAMESPACE)


def _acting_player(data) -> Any:
    """Name of the player a vote is cast for: payload first, then the session."""
    name = data.get('player')
    return name or session.get('player')


def handle_connect(auth=None):
    join_room(ROOM)
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*_args):
    if not _announced_sids.pop(_get_sid(), False):
        return
    _broadcast('player_status_update', get_engine().track_offline())


def handle_new_player(_data=None):
    sid = _get_sid()
    if _announced_sids.get(sid):
        return
    _announced_sids[sid] = True
    _broadcast('player_status_update', get_engine().track_online())


def handle_reset_game(_data=None):
    players = get_engine().reset_game()
    _broadcast('new_role', {'players': [p.to_dict() for p in players]})


def handle_reveal_word(_data=None):
    _broadcast('reveal_word', get_engine().reveal_word())


def handle_start_game(_data=None):
    engine = get_engine()
    _broadcast('start_game')

    def _on_tick(remaining: int) -> None:
        _broadcast('countdown_update', remaining)

    engine.start_round(_on_tick)


def handle_word_found(_data=None):
    get_engine().word_found()
    _broadcast('word_found')


def handle_display_vote1(_data=None):
    get_engine().display_vote(1)
    _broadcast('display_vote1')


def handle_display_vote2(_data=None):
    candidates = get_engine().display_vote(2) or []
    _broadcast('display_vote2', [p.to_dict() for p in candidates])


def _handle_vote(vote_number: int, data) -> None:
    if not isinstance(data, dict):
        data = {}
    player = _acting_player(data)
    if not player:
        emit('error', {'message': 'player is required'})
        return
    result = get_engine().submit_vote(vote_number, player, data.get('vote'))
    if result is not None:
        _broadcast(f'vote{vote_number}_ended', result)


def handle_vote1(data=None):
    _handle_vote(1, data)


def handle_vote2(data=None):
    _handle_vote(2, data)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    handlers = {
        'connect': handle_connect,
        'disconnect': handle_disconnect,
        'new_player': handle_new_player,
        'reset_game': handle_reset_game,
        'reveal_word': handle_reveal_word,
        'start_game': handle_start_game,
        'word_found': handle_word_found,
        'display_vote1': handle_display_vote1,
        'display_vote2': handle_display_vote2,
        'vote1': handle_vote1,
        'vote2': handle_vote2,
    }
    for event, handler in handlers.items():
        socketio.on_event(event, handler, namespace=NAMESPACE)
