import os
import sys
import random
import pytest

# Ensure the project root (containing the `insider` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from insider import create_app, socketio
from insider.services.session import SessionEngine


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    WORD_LIST = ['apple', 'volcano', 'lighthouse']
    WORD_LIST_PATH = os.path.join(PROJECT_ROOT, 'words', 'default.txt')
    TRAITOR_OPTIONAL = True
    COUNTDOWN_SECONDS = 3
    COUNTDOWN_INTERVAL_SEC = 0
    INITIAL_PLAYERS = []
    CORS_ORIGINS = ['http://localhost:5173']


class ManualScheduler:
    """Collects background tasks so tests decide when they run."""

    def __init__(self):
        self.tasks = []

    def start_background_task(self, target, *args):
        self.tasks.append((target, args))

    def sleep(self, _seconds):
        pass

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for target, args in tasks:
            target(*args)


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def engine(scheduler):
    return SessionEngine(
        word_list=['apple', 'volcano', '  ', 'lighthouse', ''],
        traitor_optional=True,
        countdown_seconds=300,
        start_background_task=scheduler.start_background_task,
        sleep=scheduler.sleep,
        rng=random.Random(1234),
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
