"""Count reps in a recorded IMU session.

Example:
    python -m repcounter.replay session.csv --model curl_model.joblib
    python -m repcounter.replay session.csv --model curl_model.joblib --live --sync
"""

import argparse
import logging
import sys

import joblib

from repcounter.config import get_settings
from repcounter.core import (
    CounterPreferences,
    HttpPreferencesSource,
    HttpSyncSink,
    ProbabilisticModelClassifier,
    ReplaySensorSource,
    RepCompleted,
    GoalReached,
    SessionController,
    count_reps_in_recording,
    load_recording,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Count reps in a recorded IMU session")
    parser.add_argument("recording", help="CSV with timestamp,accel_x..gyro_z columns")
    parser.add_argument("--model", required=True, help="joblib file with a predict_proba estimator")
    parser.add_argument("--live", action="store_true",
                        help="Replay through a live session at the sampling rate")
    parser.add_argument("--sync", action="store_true",
                        help="Send the finished set to the companion service (--live only)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    config = settings.counter_config()
    classifier = ProbabilisticModelClassifier(joblib.load(args.model))

    if not args.live:
        result = count_reps_in_recording(load_recording(args.recording), classifier, config)
        print(f"{result.rep_count} reps in {result.duration_seconds:.1f}s "
              f"({result.windows_classified} windows, {result.prediction_errors} errors)")
        return 0

    source = ReplaySensorSource.from_csv(args.recording, realtime=True)
    defaults = CounterPreferences(settings.target_reps, settings.haptics_enabled)
    sync_sink = None
    preferences = None
    if args.sync:
        sync_sink = HttpSyncSink(settings.companion_url, timeout=settings.sync_timeout_seconds)
        preferences = HttpPreferencesSource(settings.companion_url, defaults)

    def on_event(event):
        if isinstance(event, RepCompleted):
            print(f"rep {event.count}")
        elif isinstance(event, GoalReached):
            print(f"goal reached at {event.count} reps")

    controller = SessionController(
        config, source, classifier,
        sync_sink=sync_sink,
        preferences=preferences,
        on_event=on_event,
        haptics_enabled=settings.haptics_enabled,
    )
    if not controller.start():
        print(controller.status, file=sys.stderr)
        return 1
    try:
        source.finished.wait()
    except KeyboardInterrupt:
        pass
    finally:
        controller.close()
    print(f"{controller.rep_count} reps")
    return 0


if __name__ == "__main__":
    sys.exit(main())
