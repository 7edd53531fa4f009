from flask import Blueprint, jsonify, request, session

from insider import get_engine

main = Blueprint('main', __name__)


def _payload():
    """Accept JSON bodies as well as classic form posts."""
    data = request.get_json(silent=True)
    if isinstance(data, dict) and data:
        return data
    return request.form.to_dict()


def _is_checked(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('on', '1', 'true', 'yes')


@main.route('/')
def index():
    engine = get_engine()
    return jsonify({'players': [p.to_dict() for p in engine.get_visible_players()]})


@main.route('/presence')
def presence():
    return jsonify(get_engine().get_player_status())


@main.route('/admin/players', methods=['GET'])
def admin_players():
    engine = get_engine()
    return jsonify({'players': [p.to_dict() for p in engine.players]})


@main.route('/admin/players', methods=['POST'])
def add_player():
    data = _payload()
    name = data.get('player')
    if not isinstance(name, str) or not name.strip():
        return jsonify({'error': 'Player name is required'}), 400
    engine = get_engine()
    engine.add_player(name, _is_checked(data.get('admin', False)))
    return jsonify({'players': [p.to_dict() for p in engine.players]}), 201


@main.route('/admin/players/<string:name>', methods=['DELETE'])
def delete_player(name):
    engine = get_engine()
    engine.delete_player(name)
    return jsonify({'players': [p.to_dict() for p in engine.players]})


@main.route('/deletePlayer')
def delete_player_by_query():
    engine = get_engine()
    name = request.args.get('player')
    if name:
        engine.delete_player(name)
    return jsonify({'players': [p.to_dict() for p in engine.players]})


@main.route('/word', methods=['POST'])
def set_word():
    # The chosen word is never echoed back; clients learn it on reveal
    get_engine().set_word(_payload().get('word'))
    return jsonify({'status': 'ok'})


@main.route('/game', methods=['POST'])
def choose_player():
    name = _payload().get('player')
    if not name:
        return jsonify({'error': 'Player name is required'}), 400
    player = get_engine().get_player(name)
    if player is None or player.is_ghost:
        return jsonify({'error': 'Player not found'}), 404
    session['player'] = player.name
    return jsonify(player.to_dict())


@main.route('/game', methods=['GET'])
def board():
    name = session.get('player')
    if not name:
        return jsonify({'error': 'No player selected'}), 401
    engine = get_engine()
    player = engine.get_player(name)
    if player is None:
        session.pop('player', None)
        return jsonify({'error': 'Player not found'}), 404
    return jsonify({
        'player': player.to_dict(),
        'status': engine.status,
        'result_vote1': engine.result_vote1,
        'result_vote2': engine.result_vote2,
    })
