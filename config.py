import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name, default):
    value = os.environ.get(name)
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(',') if item.strip()]


def parse_initial_players(entries):
    """Turn ``['Alice', 'Bob:admin']`` into ``[('Alice', False), ('Bob', True)]``."""
    players = []
    for entry in entries:
        name, _, flag = entry.partition(':')
        if name.strip():
            players.append((name.strip(), flag.strip().lower() == 'admin'))
    return players


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'session-insider-secret'
    # One word per line, blank lines are ignored
    WORD_LIST_PATH = os.environ.get('WORD_LIST_PATH') or os.path.join(BASE_DIR, 'words', 'default.txt')
    # Explicit word list; takes precedence over WORD_LIST_PATH when set
    WORD_LIST = None
    # Deal a "No Traitor" ghost so a round may be played without a human Traitor
    TRAITOR_OPTIONAL = _env_bool('TRAITOR_OPTIONAL', True)
    # Discussion countdown (seconds)
    COUNTDOWN_SECONDS = int(os.environ.get('COUNTDOWN_SECONDS', '300'))
    COUNTDOWN_INTERVAL_SEC = float(os.environ.get('COUNTDOWN_INTERVAL_SEC', '1'))
    # Roster seeded at startup, e.g. "Alice,Bob:admin"
    INITIAL_PLAYERS = parse_initial_players(_env_list('INITIAL_PLAYERS', []))
    CORS_ORIGINS = _env_list('CORS_ORIGINS', [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    ])
