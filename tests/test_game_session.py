import random

import pytest

from draw_guess.models.game import GameStatus
from draw_guess.services.game_service import GameService, initialize_game_service
from draw_guess.services.scheduler import ManualScheduler
from draw_guess.services.word_bank import get_word_bank


def draw(session, times):
    state = None
    for _ in range(times):
        state = session.report_draw_action()
    return state


def test_new_session_is_idle(make_session):
    session = make_session()
    state = session.get_state()

    assert session.status is GameStatus.IDLE
    assert state.status == "idle"
    assert state.score == 0
    assert state.round_number == 1
    assert state.time_remaining == 60
    assert state.drawing_progress == 0
    assert state.target_word is None
    assert session.target_word is None


def test_start_begins_a_round(make_session, scheduler):
    session = make_session()
    state = session.start()

    assert state.status == "playing"
    assert state.time_remaining == 60
    assert state.drawing_progress == 0
    assert state.guesses == []
    assert state.target_word is None
    assert session.target_word in get_word_bank().words_in_category(session.category)
    assert state.category_label == get_word_bank().category_label(session.category)
    assert session.current_round.started_at == scheduler.now()


def test_start_while_playing_keeps_the_round(make_session, scheduler):
    session = make_session()
    session.start()
    word = session.target_word
    scheduler.advance(5)

    state = session.start()

    assert session.target_word == word
    assert state.time_remaining == 55


def test_timer_counts_down_once_per_second(make_session, scheduler):
    session = make_session()
    session.start()

    scheduler.advance(10)
    assert session.time_remaining == 50

    scheduler.advance(0.5)
    assert session.time_remaining == 50


def test_progress_from_draw_actions(make_session):
    session = make_session()
    session.start()

    assert draw(session, 3).drawing_progress == 6

    previous = 6
    for _ in range(60):
        progress = session.report_draw_action().drawing_progress
        assert progress >= previous
        previous = progress
    assert previous == 100


def test_draw_actions_ignored_outside_playing(make_session, scheduler):
    session = make_session()
    assert draw(session, 3).drawing_progress == 0

    session.start()
    scheduler.advance(60)
    assert session.status is GameStatus.LOST
    assert draw(session, 3).drawing_progress == 0


def test_guessing_waits_for_ten_percent_progress(make_session, scheduler):
    session = make_session()
    session.start()
    draw(session, 4)

    scheduler.advance(10)
    assert session.guesses == []
    assert session.guess_pending is False

    draw(session, 1)
    assert session.guess_pending is True

    scheduler.advance(4)
    assert len(session.guesses) == 1


def test_guesses_fire_every_two_to_four_seconds(make_session, scheduler):
    session = make_session(rng=random.Random(3))
    session.start()
    draw(session, 5)

    fired_at = []
    last = 0
    for step in range(1, 200):
        scheduler.advance(0.1)
        if len(session.guesses) > last:
            fired_at.append(step / 10)
            last = len(session.guesses)
        if session.status is not GameStatus.PLAYING:
            break

    gaps = [b - a for a, b in zip([0.0] + fired_at, fired_at)]
    assert gaps
    assert all(1.9 <= gap <= 4.1 for gap in gaps)


def test_timeout_loses_round_without_scoring(make_session, scheduler, fixed_random):
    session = make_session(rng=fixed_random(0.99))
    session.start()
    draw(session, 5)

    scheduler.advance(60)

    assert session.status is GameStatus.LOST
    assert session.time_remaining == 0
    assert session.score == 0
    assert session.guess_pending is False
    assert scheduler.pending == 0

    guesses_at_loss = len(session.guesses)
    assert guesses_at_loss > 0
    scheduler.advance(30)
    assert len(session.guesses) == guesses_at_loss
    assert session.time_remaining == 0
    assert session.get_state().target_word == session.target_word


def test_correct_guess_wins_and_scores(make_session, scheduler, fixed_random):
    # random() == 0.5: guesses every 3 s, the fifth one clears the probability
    session = make_session(rng=fixed_random(0.5))
    session.start()
    draw(session, 50)

    scheduler.advance(15)

    assert session.status is GameStatus.WON
    guesses = session.guesses
    assert len(guesses) == 5
    assert guesses[-1].is_correct is True
    assert guesses[-1].guess == session.target_word
    assert guesses[-1].confidence == 90
    assert not any(g.is_correct for g in guesses[:-1])
    assert session.time_remaining == 46
    assert session.score == 46 * 10 + 1 * 50
    assert scheduler.pending == 0

    scheduler.advance(20)
    assert session.time_remaining == 46
    assert len(session.guesses) == 5


def test_next_round_keeps_score_and_counts_rounds(make_session, scheduler, fixed_random):
    session = make_session(rng=fixed_random(0.5))
    session.start()
    draw(session, 50)
    scheduler.advance(15)
    first_score = session.score

    state = session.next_round()

    assert state.status == "playing"
    assert state.round_number == 2
    assert state.score == first_score
    assert state.drawing_progress == 0
    assert state.guesses == []
    assert state.time_remaining == 60

    draw(session, 50)
    scheduler.advance(15)
    assert session.status is GameStatus.WON
    assert session.score == first_score + session.time_remaining * 10 + 2 * 50


def test_next_round_only_after_a_finished_round(make_session, scheduler):
    session = make_session()
    assert session.next_round().status == "idle"

    session.start()
    scheduler.advance(3)
    state = session.next_round()

    assert state.round_number == 1
    assert state.time_remaining == 57


def test_reset_game_from_any_state(make_session, scheduler, fixed_random):
    session = make_session(rng=fixed_random(0.5))
    assert session.reset_game().status == "playing"

    draw(session, 50)
    scheduler.advance(15)
    session.next_round()
    assert session.score > 0
    draw(session, 10)

    state = session.reset_game()

    assert state.status == "playing"
    assert state.score == 0
    assert state.round_number == 1
    assert state.drawing_progress == 0
    assert state.guesses == []


def test_reset_cancels_previous_round_timers(make_session, scheduler):
    session = make_session()
    session.start()
    draw(session, 5)
    old_round_id = session.current_round.round_id
    assert session.guess_pending is True

    session.reset_game()
    scheduler.advance(1)

    assert session.time_remaining == 59
    assert session.guesses == []
    assert session.guess_pending is False

    # A late callback from the old round must be ignored
    session._on_tick(old_round_id)
    session._on_guess(old_round_id)
    assert session.time_remaining == 59
    assert session.guesses == []


def test_hint_costs_points_and_never_goes_negative(make_session, scheduler, fixed_random):
    session = make_session(rng=fixed_random(0.5))
    assert session.request_hint() is None

    session.start()
    hint = session.request_hint()
    assert hint.startswith("这是一个")
    assert session.score == 0
    assert session.get_state().hints_used == 1

    draw(session, 50)
    scheduler.advance(15)
    assert session.request_hint() is None
    won_score = session.score

    session.next_round()
    session.request_hint()
    assert session.score == won_score - 50
    assert session.status is GameStatus.PLAYING


def test_score_floor_with_repeated_hints(make_session):
    session = make_session()
    session.start()
    for _ in range(6):
        session.request_hint()

    assert session.score == 0


def test_reveal_word(make_session):
    session = make_session()
    assert session.reveal_word().target_word is None

    session.start()
    assert session.get_state().target_word is None
    assert session.get_state(include_word=True).target_word == session.target_word

    state = session.reveal_word()
    assert state.word_revealed is True
    assert session.get_state().target_word == session.target_word

    session.reset_game()
    assert session.get_state().target_word is None


def test_listener_receives_timer_driven_changes(make_session, scheduler, fixed_random):
    events = []
    session = make_session(rng=fixed_random(0.5),
                           listener=lambda game_id, event, state: events.append((game_id, event, state.status)))
    session.start()
    draw(session, 50)

    scheduler.advance(15)

    names = [event for _, event, _ in events]
    assert names.count("tick") == 14
    assert names.count("guess") == 4
    assert names[-1] == "round_won"
    assert events[-1] == ("test-game", "round_won", "won")


def test_close_cancels_timers(make_session, scheduler):
    session = make_session()
    session.start()
    draw(session, 5)

    session.close()

    assert scheduler.pending == 0
    scheduler.advance(10)
    assert session.time_remaining == 60


def test_callbacks_running_during_close_do_not_rearm(make_session, scheduler):
    session = make_session()
    session.start()
    draw(session, 5)
    tick_callback = session._tick_call.callback
    guess_callback = session._guess_call.callback

    session.close()
    tick_callback()
    guess_callback()

    assert session.closed is True
    assert scheduler.pending == 0
    assert session.time_remaining == 60
    assert session.guesses == []
    scheduler.advance(10)
    assert session.time_remaining == 60


def test_late_tick_does_not_shift_later_ticks(make_session, scheduler):
    session = make_session()
    session.start()
    late_tick = session._tick_call
    late_tick.cancel()

    scheduler.advance(1.3)
    late_tick.callback()

    assert session.time_remaining == 59
    assert session._tick_call.due == pytest.approx(2.0)

    scheduler.advance(0.75)
    assert session.time_remaining == 58
    scheduler.advance(8)
    assert session.time_remaining == 50


def test_service_sessions_are_independent():
    scheduler = ManualScheduler()
    service = GameService(scheduler=scheduler, seed=5)
    first = service.get_session(service.create_new_game())
    second = service.get_session(service.create_new_game())

    first.start()
    scheduler.advance(5)
    second.start()
    scheduler.advance(5)

    assert first.time_remaining == 50
    assert second.time_remaining == 55


def test_seeded_services_replay_the_same_words():
    def words(seed):
        service = GameService(scheduler=ManualScheduler(), seed=seed)
        session = service.get_session(service.create_new_game())
        picked = []
        for _ in range(5):
            session.reset_game()
            picked.append(session.target_word)
        return picked

    assert words(42) == words(42)


def test_service_delete_and_lookup():
    scheduler = ManualScheduler()
    service = GameService(scheduler=scheduler, seed=1)
    game_id = service.create_new_game()
    service.get_session(game_id).start()

    assert service.get_game_state(game_id).status == "playing"
    assert service.delete_game(game_id) is True
    assert scheduler.pending == 0
    assert service.delete_game(game_id) is False
    assert service.get_game_state(game_id) is None


def test_service_listener_dispatch():
    scheduler = ManualScheduler()
    service = GameService(scheduler=scheduler, seed=1)
    game_id = service.create_new_game()
    service.get_session(game_id).start()

    seen = []
    service.set_state_listener(lambda gid, event, state: seen.append((gid, event)))
    scheduler.advance(2)

    assert seen == [(game_id, "tick"), (game_id, "tick")]


def test_reinitialized_service_keeps_state_listener():
    listener = lambda gid, event, state: None  # noqa: E731
    first = initialize_game_service(scheduler=ManualScheduler(), seed=1)
    first.set_state_listener(listener)

    second = initialize_game_service(scheduler=ManualScheduler(), seed=2)

    assert second is not first
    assert second.state_listener is listener
