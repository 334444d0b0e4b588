import os
import random
import tempfile

import pytest

# Keep log files out of the working tree; must happen before draw_guess is imported
os.environ['LOG_DIR'] = tempfile.mkdtemp(prefix='draw_guess_logs_')

from draw_guess import create_app  # noqa: E402
from draw_guess.config import TestingConfig  # noqa: E402
from draw_guess.services.game_service import GameSession, initialize_game_service  # noqa: E402
from draw_guess.services.scheduler import ManualScheduler  # noqa: E402
from draw_guess.services.word_bank import WordBank  # noqa: E402


class FixedRandom(random.Random):
    """random() always returns the same value; choice() stays deterministic."""

    def __init__(self, value, seed=0):
        self.value = value
        super().__init__(seed)

    def random(self):
        return self.value


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def rng():
    return random.Random(20240601)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def small_catalog():
    return {
        "animals": ["猫", "狗", "鸟"],
        "food": ["苹果", "香蕉"],
    }


@pytest.fixture
def small_bank(small_catalog):
    return WordBank(small_catalog)


@pytest.fixture
def make_session(scheduler):
    def factory(rng=None, word_bank=None, listener=None, game_id="test-game"):
        return GameSession(game_id, scheduler, word_bank=word_bank,
                           rng=rng or random.Random(7), listener=listener)
    return factory


@pytest.fixture
def game_service():
    return initialize_game_service(scheduler=ManualScheduler(), seed=1234)


@pytest.fixture
def app_and_socketio(game_service):
    return create_app(TestingConfig)


@pytest.fixture
def client(app_and_socketio):
    app, _ = app_and_socketio
    return app.test_client()


@pytest.fixture
def socket_client(app_and_socketio):
    app, socketio = app_and_socketio
    test_client = socketio.test_client(app)
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()
