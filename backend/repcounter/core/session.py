"""
Session lifecycle and orchestration.

SessionController wires the pipeline together:

    sensor sample -> SlidingWindowBuffer -> (on fill) ClassificationGate
        -> JitterFilter -> RepStateMachine -> session events

start() and stop() are the only control inputs. Every failure inside a
running session is converted into a StatusChanged event; only an
unavailable sensor keeps a session from starting.
"""

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional
import logging

from repcounter.core.classification_gate import ClassificationGate
from repcounter.core.collaborators import (
    Classifier, CounterPreferences, HapticSink, PreferencesProvider, SensorSource, SyncSink
)
from repcounter.core.counter_config import CounterConfig
from repcounter.core.errors import SensorUnavailable
from repcounter.core.events import (
    EventKind, GoalReached, RepCompleted, SessionEvent, Status, StatusChanged
)
from repcounter.core.handoff import ClassificationWorker
from repcounter.core.jitter_filter import JitterFilter
from repcounter.core.rep_state_machine import RepState, RepStateMachine
from repcounter.core.sinks import NotificationDispatcher
from repcounter.core.window_buffer import Sample, SlidingWindowBuffer, Window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    running: bool
    rep_count: int
    rep_state: RepState
    status: str
    target_reps: int
    windows_classified: int
    prediction_errors: int


class SessionController:
    """
    Owns one counting session at a time.

    Policy for repeated start(): while a session is running, start() is a
    no-op returning False; the running session and its subscription are left
    untouched.

    close() is terminal: the notification thread is shut down and later
    start() calls return False.

    on_event consumers run on the ingestion or classification thread and must
    not call start() or stop(). stop() joins that thread while holding the
    lifecycle lock, so a re-entrant call deadlocks.
    """

    def __init__(
        self,
        config: CounterConfig,
        sensor_source: SensorSource,
        classifier: Classifier,
        sync_sink: Optional[SyncSink] = None,
        haptic_sink: Optional[HapticSink] = None,
        preferences: Optional[PreferencesProvider] = None,
        on_event: Optional[Callable[[SessionEvent], None]] = None,
        haptics_enabled: bool = True,
        threaded_classification: bool = False,
    ):
        self.config = config
        self.sensor_source = sensor_source
        self.sync_sink = sync_sink
        self.haptic_sink = haptic_sink
        self.preferences = preferences
        self.on_event = on_event
        self.threaded_classification = threaded_classification

        self.buffer = SlidingWindowBuffer(config.window_size, config.overlap)
        self.gate = ClassificationGate(
            classifier,
            target_label=config.target_label,
            confidence_threshold=config.confidence_threshold,
            aux_state_size=config.aux_state_size,
        )
        self.jitter_filter = JitterFilter(config.history_size, config.curl_confirmation_threshold)
        self.state_machine = RepStateMachine(config.target_reps)

        self._default_preferences = CounterPreferences(
            target_reps=config.target_reps, haptics_enabled=haptics_enabled
        )
        self._active_preferences = self._default_preferences

        # _lifecycle_lock serializes start/stop; _state_lock guards pipeline state
        self._lifecycle_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._closed = False
        self._running = False
        self._generation = 0
        self._status = Status.READY
        self._windows_classified = 0
        self._prediction_errors = 0

        self._dispatcher = NotificationDispatcher()
        self._worker: Optional[ClassificationWorker] = None

    # =====================================================
    # Public state
    # =====================================================

    @property
    def running(self) -> bool:
        return self._running

    @property
    def rep_count(self) -> int:
        return self.state_machine.rep_count

    @property
    def status(self) -> str:
        return self._status

    def snapshot(self) -> SessionSnapshot:
        with self._state_lock:
            return SessionSnapshot(
                running=self._running,
                rep_count=self.state_machine.rep_count,
                rep_state=self.state_machine.state,
                status=self._status,
                target_reps=self.state_machine.target_reps,
                windows_classified=self._windows_classified,
                prediction_errors=self._prediction_errors,
            )

    # =====================================================
    # Lifecycle
    # =====================================================

    def start(self) -> bool:
        """Begin a session. Returns False if already running or sensors are unavailable."""
        with self._lifecycle_lock:
            if self._closed:
                logger.warning("start() ignored, controller is closed")
                return False
            if self._running:
                logger.info("start() ignored, session already running")
                return False

            if not self.sensor_source.is_available():
                logger.warning("Cannot start session: sensor source unavailable")
                self._emit([self._update_status(Status.SENSORS_UNAVAILABLE)])
                return False

            preferences = self._load_preferences()

            with self._state_lock:
                self._generation += 1
                self._active_preferences = preferences
                self.buffer.reset()
                self.jitter_filter.reset()
                self.state_machine.reset(target_reps=preferences.target_reps)
                self._windows_classified = 0
                self._prediction_errors = 0
                self._running = True

            if self.threaded_classification:
                self._worker = ClassificationWorker(self._handle_window)
                self._worker.start()

            try:
                self.sensor_source.subscribe(self.config.sampling_rate, self._on_sample)
            except Exception as e:
                if not isinstance(e, SensorUnavailable):
                    logger.exception("Sensor subscription failed")
                else:
                    logger.warning(f"Sensor subscription failed: {e}")
                with self._state_lock:
                    self._running = False
                self._stop_worker()
                self._emit([self._update_status(Status.SENSORS_UNAVAILABLE)])
                return False

            logger.info(
                f"Session started: target={preferences.target_reps} reps, "
                f"window={self.config.window_size}, slide={self.config.overlap}, "
                f"rate={self.config.sampling_rate} Hz"
            )
            self._emit([self._update_status(Status.STARTED)])
            return True

    def stop(self) -> bool:
        """
        End the session and quiesce ingestion.

        A partially filled window, and any window waiting in the handoff slot,
        is discarded. The completed count goes to the sync sink only if > 0.
        Returns False when no session was running.
        """
        with self._lifecycle_lock:
            if not self._running:
                return False

            with self._state_lock:
                self._running = False

            # Neither of these may be called under _state_lock: both join threads
            # whose callbacks acquire it.
            self.sensor_source.unsubscribe()
            self._stop_worker()

            with self._state_lock:
                rep_count = self.state_machine.rep_count

            logger.info(f"Session stopped with {rep_count} reps")
            self._emit([self._update_status(Status.READY)])

            if rep_count > 0 and self.sync_sink is not None:
                logger.info(f"Sending completed set: {rep_count} reps")
                self._dispatcher.submit(
                    "Completed set sync", self.sync_sink.notify_completed_set, rep_count
                )
            return True

    def close(self):
        """Stop any running session and wait for pending notifications."""
        with self._lifecycle_lock:
            self._closed = True
        self.stop()
        self._dispatcher.shutdown(wait=True)

    # =====================================================
    # Ingestion path
    # =====================================================

    def _on_sample(self, sample: Sample):
        with self._state_lock:
            if not self._running:
                return
            window = self.buffer.push(sample)
            generation = self._generation

        if window is None:
            return
        if self._worker is not None:
            self._worker.submit(window)
        else:
            self._process_window(window, generation)

    def _handle_window(self, window: Window):
        self._process_window(window, self._generation)

    def _process_window(self, window: Window, generation: int):
        # Classifier runs outside the lock; its result is discarded if the
        # session ended meanwhile.
        result = self.gate.evaluate(window)

        events: List[SessionEvent] = []
        with self._state_lock:
            if not self._running or generation != self._generation:
                logger.debug(f"Discarding window {window.sequence} from ended session")
                return
            self._windows_classified += 1
            if result.failed:
                # Failed windows never reach the filter, so they can't move the state
                self._prediction_errors += 1
                events.append(self._set_status(Status.PREDICTION_ERROR))
            else:
                smoothed = self.jitter_filter.filter(result.label)
                for event in self.state_machine.process(smoothed):
                    if isinstance(event, StatusChanged):
                        event = self._set_status(event.message)
                    events.append(event)
            haptics_enabled = self._active_preferences.haptics_enabled

        for event in events:
            if isinstance(event, RepCompleted):
                logger.info(f"Rep completed: {event.count}")
                if haptics_enabled:
                    self._trigger_haptic(EventKind.REP_COMPLETED)
            elif isinstance(event, GoalReached):
                logger.info(f"Goal reached: {event.count} reps")
                self._trigger_haptic(EventKind.GOAL_REACHED)
        self._emit(events)

    # =====================================================
    # Helpers
    # =====================================================

    def _load_preferences(self) -> CounterPreferences:
        if self.preferences is None:
            return self._default_preferences
        try:
            return self.preferences.get_preferences()
        except Exception:
            logger.exception("Preferences provider failed, using defaults")
            return self._default_preferences

    def _update_status(self, message: str) -> StatusChanged:
        with self._state_lock:
            return self._set_status(message)

    def _set_status(self, message: str) -> StatusChanged:
        # Caller holds _state_lock
        self._status = message
        return StatusChanged(message)

    def _trigger_haptic(self, kind: EventKind):
        if self.haptic_sink is None:
            return
        self._dispatcher.submit(f"Haptic {kind.value}", self.haptic_sink.trigger, kind)

    def _stop_worker(self):
        if self._worker is not None:
            self._worker.stop()
            self._worker = None

    def _emit(self, events: List[SessionEvent]):
        if self.on_event is None:
            return
        for event in events:
            try:
                self.on_event(event)
            except Exception:
                logger.exception(f"Event consumer failed on {event.kind.value}")
