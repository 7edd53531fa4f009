from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def get_engine():
    """Return the SessionEngine owned by the current application."""
    return current_app.extensions['insider']


def _run_inline(target, *args):
    target(*args)


def _no_sleep(_seconds):
    pass


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from insider.services.session import SessionEngine
    from insider.words import load_word_list

    words = flask_app.config.get('WORD_LIST')
    if words is None:
        words = load_word_list(flask_app.config['WORD_LIST_PATH'], logger=flask_app.logger)

    # Tests run the countdown worker inline with no sleeping so ticks are deterministic
    if flask_app.config.get('TESTING'):
        start_task, sleep = _run_inline, _no_sleep
    else:
        start_task, sleep = socketio.start_background_task, socketio.sleep

    flask_app.extensions['insider'] = SessionEngine(
        word_list=words,
        traitor_optional=flask_app.config.get('TRAITOR_OPTIONAL', True),
        initial_players=flask_app.config.get('INITIAL_PLAYERS') or [],
        countdown_seconds=int(flask_app.config.get('COUNTDOWN_SECONDS', 300)),
        countdown_interval=float(flask_app.config.get('COUNTDOWN_INTERVAL_SEC', 1)),
        start_background_task=start_task,
        sleep=sleep,
        logger=flask_app.logger,
    )

    from insider.routes import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers
    try:
        from insider.socketio_events import register_socketio_handlers
        register_socketio_handlers()
    except Exception as exc:
        flask_app.logger.warning(f"SocketIO events not loaded: {exc}")

    @click.command('check-words')
    def check_words_command():
        """Reports how many words the session can draw from."""
        engine = flask_app.extensions['insider']
        count = len(engine.word_list)
        if not count:
            click.echo('Word list is empty: words must be entered by hand.', err=True)
            raise click.exceptions.Exit(1)
        click.echo(f'{count} words available.')

    flask_app.cli.add_command(check_words_command)

    return flask_app
