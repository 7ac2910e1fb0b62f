"""Tests for SessionController lifecycle and event flow."""

import time

import numpy as np
import pytest

from repcounter.core import (
    ClassifierError,
    CounterPreferences,
    EventKind,
    GoalReached,
    RepCompleted,
    RepState,
    ReplaySensorSource,
    Sample,
    SensorUnavailable,
    SessionController,
    Status,
    StatusChanged,
)

from conftest import FakeSensorSource, RecordingSyncSink, ScriptedClassifier

# small_config: first window after 4 samples, then one every 2 samples
FIRST_WINDOW = 4
SLIDE = 2

# Debounced (3 of 5) this goes O, O, T, T, T, O -> one rep on the 6th window
ONE_REP = ["bicep_curl"] * 3 + ["other"] * 3
REP_WINDOWS = len(ONE_REP)


def _push_windows(sensor: FakeSensorSource, count: int, first: bool = True):
    """Push exactly enough samples to produce `count` classifications."""
    if count <= 0:
        return
    if first:
        sensor.push(FIRST_WINDOW)
        count -= 1
    sensor.push(SLIDE * count)


def _controller(config, sensor, script, **kwargs):
    events = []
    controller = SessionController(
        config, sensor, ScriptedClassifier(script), on_event=events.append, **kwargs
    )
    return controller, events


def test_start_subscribes_at_sampling_rate(small_config, sensor):
    controller, events = _controller(small_config, sensor, ["other"])
    assert controller.start() is True
    assert controller.running
    assert sensor.subscribe_calls == 1
    assert sensor.rate_hz == small_config.sampling_rate
    assert events == [StatusChanged(Status.STARTED)]
    controller.close()


def test_start_fails_when_sensor_unavailable(small_config):
    sensor = FakeSensorSource(available=False)
    controller, events = _controller(small_config, sensor, ["other"])
    assert controller.start() is False
    assert not controller.running
    assert sensor.subscribe_calls == 0
    assert controller.status == Status.SENSORS_UNAVAILABLE
    assert events == [StatusChanged(Status.SENSORS_UNAVAILABLE)]
    controller.close()


def test_unavailable_start_leaves_previous_count_untouched(small_config, sensor):
    controller, _ = _controller(small_config, sensor, ONE_REP)
    controller.start()
    _push_windows(sensor, REP_WINDOWS)
    controller.stop()
    assert controller.rep_count == 1

    sensor.available = False
    assert controller.start() is False
    assert controller.rep_count == 1
    controller.close()


def test_subscription_failure_is_reported_as_unavailable(small_config, sensor):
    def refuse(rate_hz, callback):
        raise SensorUnavailable("motion updates refused")

    sensor.subscribe = refuse
    controller, _ = _controller(small_config, sensor, ["other"])
    assert controller.start() is False
    assert not controller.running
    assert controller.status == Status.SENSORS_UNAVAILABLE
    controller.close()


def test_one_full_cycle_emits_single_rep(small_config, sensor, haptics):
    controller, events = _controller(small_config, sensor, ONE_REP, haptic_sink=haptics)
    controller.start()
    _push_windows(sensor, REP_WINDOWS + 4)
    controller.close()

    reps = [e for e in events if isinstance(e, RepCompleted)]
    assert reps == [RepCompleted(1)]
    assert controller.rep_count == 1
    assert StatusChanged(Status.IN_REP) in events
    assert StatusChanged(Status.DONE) in events
    assert haptics.triggered == [EventKind.REP_COMPLETED]


def test_goal_reached_on_target_rep(small_config, sensor, haptics):
    controller, events = _controller(small_config, sensor, ONE_REP * 2, haptic_sink=haptics)
    controller.start()
    _push_windows(sensor, REP_WINDOWS * 2)
    controller.close()

    assert controller.rep_count == 2
    assert [e for e in events if isinstance(e, GoalReached)] == [GoalReached(2)]
    assert controller.status == Status.READY
    assert haptics.triggered == [
        EventKind.REP_COMPLETED, EventKind.REP_COMPLETED, EventKind.GOAL_REACHED
    ]


def test_rep_haptic_skipped_when_disabled_but_goal_haptic_fires(small_config, sensor, haptics):
    controller, _ = _controller(
        small_config, sensor, ONE_REP * 2, haptic_sink=haptics, haptics_enabled=False
    )
    controller.start()
    _push_windows(sensor, REP_WINDOWS * 2)
    controller.close()
    assert haptics.triggered == [EventKind.GOAL_REACHED]


def test_partial_window_is_never_classified(small_config, sensor):
    controller, _ = _controller(small_config, sensor, ["bicep_curl"])
    controller.start()
    sensor.push(FIRST_WINDOW - 1)
    assert controller.gate.classifier.calls == 0
    sensor.push(1)
    assert controller.gate.classifier.calls == 1
    controller.close()


def test_classifier_errors_never_change_count_or_state(small_config, sensor):
    # Enter a rep, then fail on every window
    script = ["bicep_curl"] * 3 + [ClassifierError("model crashed")]
    controller, events = _controller(small_config, sensor, script)
    controller.start()
    _push_windows(sensor, 3)
    assert controller.snapshot().rep_state is RepState.IN_REP

    _push_windows(sensor, 10, first=False)
    snapshot = controller.snapshot()
    assert snapshot.rep_state is RepState.IN_REP
    assert snapshot.rep_count == 0
    assert snapshot.prediction_errors == 10
    assert snapshot.status == Status.PREDICTION_ERROR
    assert controller.running
    controller.close()


def test_stop_without_reps_never_syncs(small_config, sensor, sync_sink):
    controller, events = _controller(small_config, sensor, ["other"], sync_sink=sync_sink)
    controller.start()
    _push_windows(sensor, 5)
    assert controller.stop() is True
    controller.close()
    assert sync_sink.sent == []
    assert events[-1] == StatusChanged(Status.READY)


def test_stop_with_reps_syncs_exactly_once(small_config, sensor, sync_sink):
    controller, _ = _controller(small_config, sensor, ONE_REP, sync_sink=sync_sink)
    controller.start()
    _push_windows(sensor, REP_WINDOWS)
    assert controller.stop() is True
    assert controller.stop() is False
    controller.close()
    assert sync_sink.sent == [1]
    assert sensor.unsubscribe_calls == 1


def test_each_session_syncs_its_own_count(small_config, sensor, sync_sink):
    controller, _ = _controller(small_config, sensor, ONE_REP * 2, sync_sink=sync_sink)
    for _ in range(2):
        controller.start()
        _push_windows(sensor, REP_WINDOWS)
        controller.stop()
    controller.close()
    assert sync_sink.sent == [1, 1]


def test_unreachable_sync_sink_keeps_local_count(small_config, sensor):
    sink = RecordingSyncSink(fail=True)
    controller, _ = _controller(small_config, sensor, ONE_REP, sync_sink=sink)
    controller.start()
    _push_windows(sensor, REP_WINDOWS)
    assert controller.stop() is True
    controller.close()
    assert sink.sent == [1]
    assert controller.rep_count == 1


def test_second_start_is_rejected_without_reset(small_config, sensor):
    controller, _ = _controller(small_config, sensor, ONE_REP + ["bicep_curl"])
    controller.start()
    _push_windows(sensor, REP_WINDOWS)
    assert controller.rep_count == 1

    assert controller.start() is False
    assert sensor.subscribe_calls == 1
    assert controller.rep_count == 1
    assert controller.running
    controller.close()


def test_samples_after_stop_are_ignored(small_config, sensor):
    controller, _ = _controller(small_config, sensor, ["bicep_curl"])
    controller.start()
    callback = sensor.callback
    sensor.push(FIRST_WINDOW - 1)
    controller.stop()

    callback(Sample(0.0, 0.0, 0.0, 0.0, 0.0, 0.0))
    assert controller.gate.classifier.calls == 0
    controller.close()


def test_restart_resets_buffer_history_and_count(small_config, sensor):
    controller, _ = _controller(small_config, sensor, ONE_REP + ["bicep_curl"] * 2)
    controller.start()
    _push_windows(sensor, REP_WINDOWS + 2)
    sensor.push(1)  # partial window left behind
    controller.stop()
    calls = controller.gate.classifier.calls

    controller.start()
    assert controller.rep_count == 0
    assert controller.jitter_filter.history == ()
    assert controller.buffer.index == 0
    sensor.push(FIRST_WINDOW - 1)
    assert controller.gate.classifier.calls == calls
    controller.close()


def test_preferences_override_target_reps(small_config, sensor):
    class Prefs:
        def get_preferences(self):
            return CounterPreferences(target_reps=1, haptics_enabled=True)

    controller, events = _controller(small_config, sensor, ONE_REP, preferences=Prefs())
    controller.start()
    _push_windows(sensor, REP_WINDOWS)
    controller.close()
    assert controller.snapshot().target_reps == 1
    assert [e for e in events if isinstance(e, GoalReached)] == [GoalReached(1)]


def test_failing_preferences_fall_back_to_config(small_config, sensor):
    class BrokenPrefs:
        def get_preferences(self):
            raise RuntimeError("companion offline")

    controller, _ = _controller(small_config, sensor, ["other"], preferences=BrokenPrefs())
    assert controller.start() is True
    assert controller.snapshot().target_reps == small_config.target_reps
    controller.close()


def test_consumer_exceptions_do_not_break_ingestion(small_config, sensor):
    def explode(event):
        raise RuntimeError("ui went away")

    controller = SessionController(
        small_config, sensor, ScriptedClassifier(ONE_REP), on_event=explode
    )
    assert controller.start() is True
    _push_windows(sensor, REP_WINDOWS)
    assert controller.rep_count == 1
    controller.close()


def test_threaded_classification_counts_reps(small_config, sensor):
    controller, events = _controller(
        small_config, sensor, ONE_REP, threaded_classification=True
    )
    controller.start()
    for i in range(REP_WINDOWS):
        sensor.push(FIRST_WINDOW if i == 0 else SLIDE)
        _wait_for(lambda: controller.snapshot().windows_classified == i + 1)
    controller.stop()
    controller.close()

    assert controller.rep_count == 1
    assert [e for e in events if isinstance(e, RepCompleted)] == [RepCompleted(1)]


def test_closed_controller_cannot_restart(small_config, sensor, haptics):
    controller, events = _controller(small_config, sensor, ONE_REP, haptic_sink=haptics)
    controller.start()
    controller.close()

    assert controller.start() is False
    assert not controller.running
    assert sensor.subscribe_calls == 1
    _push_windows(sensor, REP_WINDOWS)
    assert controller.rep_count == 0
    assert haptics.triggered == []
    assert events[-1] == StatusChanged(Status.READY)
    assert controller.stop() is False


@pytest.mark.parametrize("threaded", [False, True], ids=["inline", "threaded"])
def test_stop_quiesces_live_replay(small_config, threaded):
    source = ReplaySensorSource(np.zeros((5000, 6)), realtime=True)
    classifier = ScriptedClassifier(["other"])
    controller = SessionController(
        small_config, source, classifier, threaded_classification=threaded
    )
    assert controller.start() is True
    _wait_for(lambda: classifier.calls >= 3)

    assert controller.stop() is True
    calls = classifier.calls
    time.sleep(0.2)

    assert classifier.calls == calls
    assert source._thread is None
    assert controller._worker is None
    assert controller.snapshot().status == Status.READY
    controller.close()


def _wait_for(predicate, timeout: float = 5.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            pytest.fail("condition not met before timeout")
        time.sleep(0.005)
