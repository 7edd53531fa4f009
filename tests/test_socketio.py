from insider import socketio
from insider.models import GAME_MASTER, TRAITOR, GHOST_NAME


def _events(sio_client, name):
    return [pkt['args'] for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def _add_players(client, *names):
    for name in names:
        client.post('/admin/players', json={'player': name})


def test_socket_connect(sio_client):
    assert sio_client.is_connected('/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)


def test_presence_updates(flask_app, client, sio_client):
    _add_players(client, 'Alice', 'Bob')
    sio_client.get_received('/ws')
    sio_client.emit('new_player', namespace='/ws')
    assert _events(sio_client, 'player_status_update') == [[{'online': 1, 'offline': 1}]]

    # Announcing twice on one connection counts once
    sio_client.emit('new_player', namespace='/ws')
    assert _events(sio_client, 'player_status_update') == []

    other = socketio.test_client(flask_app, namespace='/ws')
    other.emit('new_player', namespace='/ws')
    assert _events(sio_client, 'player_status_update') == [[{'online': 2, 'offline': 0}]]
    other.disconnect(namespace='/ws')
    assert _events(sio_client, 'player_status_update') == [[{'online': 1, 'offline': 1}]]


def test_silent_connection_does_not_change_presence(flask_app, sio_client):
    other = socketio.test_client(flask_app, namespace='/ws')
    other.disconnect(namespace='/ws')
    assert flask_app.extensions['insider'].online_count == 0
    assert _events(sio_client, 'player_status_update') == []


def test_full_round(flask_app, client, sio_client):
    engine = flask_app.extensions['insider']
    _add_players(client, 'Alice', 'Bob', 'Cara')
    sio_client.get_received('/ws')

    sio_client.emit('reset_game', namespace='/ws')
    new_role = _events(sio_client, 'new_role')
    players = new_role[0][0]['players']
    assert [p['name'] for p in players] == ['Alice', 'Bob', 'Cara', GHOST_NAME]
    assert engine.status == 'role'

    sio_client.emit('reveal_word', namespace='/ws')
    revealed = _events(sio_client, 'reveal_word')[0][0]
    assert revealed['word'] in engine.word_list
    assert engine.status == 'word'

    sio_client.emit('start_game', namespace='/ws')
    received = sio_client.get_received('/ws')
    names = [pkt['name'] for pkt in received]
    assert names[0] == 'start_game'
    assert [pkt['args'][0] for pkt in received if pkt['name'] == 'countdown_update'] == [2, 1, 0]
    assert engine.status == 'in_progress'
    assert not engine.countdown_active

    sio_client.emit('word_found', namespace='/ws')
    assert _events(sio_client, 'word_found') == [[]]
    assert engine.status == 'vote1'

    sio_client.emit('display_vote1', namespace='/ws')
    assert _events(sio_client, 'display_vote1') == [[]]

    sio_client.emit('vote1', {'player': 'Alice', 'vote': '1'}, namespace='/ws')
    sio_client.emit('vote1', {'player': 'Bob', 'vote': '1'}, namespace='/ws')
    assert _events(sio_client, 'vote1_ended') == []
    sio_client.emit('vote1', {'player': 'Cara', 'vote': '0'}, namespace='/ws')
    assert _events(sio_client, 'vote1_ended') == [[{'up': 2, 'down': 1}]]
    assert engine.status == 'vote2'

    sio_client.emit('display_vote2', namespace='/ws')
    candidates = _events(sio_client, 'display_vote2')[0][0]
    assert all(p['role'] != GAME_MASTER for p in candidates)
    assert any(p['is_ghost'] for p in candidates)

    traitor = next(p.name for p in engine.players if p.role == TRAITOR)
    for player in ('Alice', 'Bob', 'Cara'):
        target = traitor if player != traitor else GHOST_NAME
        sio_client.emit('vote2', {'player': player, 'vote': target}, namespace='/ws')
    ended = _events(sio_client, 'vote2_ended')
    assert len(ended) == 1
    result = ended[0][0]
    assert result['has_won'] is True
    assert result['has_traitor'] is True
    assert result['vote_detail'][0]['name'] == traitor
    assert engine.status == 'end'

    board = client.post('/game', json={'player': 'Alice'})
    assert board.status_code == 200
    state = client.get('/game').get_json()
    assert state['status'] == 'end'
    assert state['result_vote1'] == {'up': 2, 'down': 1}
    assert state['result_vote2']['has_won'] is True


def test_vote_uses_session_identity(flask_app):
    engine = flask_app.extensions['insider']
    http = flask_app.test_client()
    http.post('/admin/players', json={'player': 'Alice'})
    http.post('/game', json={'player': 'Alice'})
    sio = socketio.test_client(flask_app, flask_test_client=http, namespace='/ws')
    sio.emit('vote1', {'vote': '1'}, namespace='/ws')
    assert engine.get_player('Alice').vote1 == '1'
    sio.disconnect(namespace='/ws')


def test_vote_without_player_reports_error(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('vote1', {'vote': '1'}, namespace='/ws')
    errors = _events(sio_client, 'error')
    assert errors == [[{'message': 'player is required'}]]


def test_reset_during_countdown_stops_it(flask_app, sio_client, client):
    engine = flask_app.extensions['insider']
    _add_players(client, 'Alice', 'Bob')
    ticks = []
    engine.countdown._start_background_task = lambda target, *args: None
    engine.start_countdown(ticks.append)
    assert engine.countdown_active
    sio_client.emit('reset_game', namespace='/ws')
    assert not engine.countdown_active
    assert ticks == []
