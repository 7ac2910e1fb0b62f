"""
Majority-vote debounce over recent binary labels.

A single misclassified window can't flip the rep state: the filter only
reports TARGET while at least `confirmation_threshold` of the last
`history_size` labels agree.
"""

from typing import Tuple
import logging

from repcounter.core.classification_gate import BinaryLabel

logger = logging.getLogger(__name__)


LabelHistory = Tuple[BinaryLabel, ...]


def debounce(
    history: LabelHistory,
    label: BinaryLabel,
    history_size: int,
    confirmation_threshold: int
) -> Tuple[LabelHistory, BinaryLabel]:
    """Append `label`, evict the oldest past capacity, and vote."""
    updated = (history + (label,))[-history_size:]
    target_count = sum(1 for entry in updated if entry is BinaryLabel.TARGET)
    smoothed = BinaryLabel.TARGET if target_count >= confirmation_threshold else BinaryLabel.OTHER
    return updated, smoothed


class JitterFilter:
    """Stateful wrapper around debounce()."""

    def __init__(self, history_size: int = 5, confirmation_threshold: int = 3):
        self.history_size = history_size
        self.confirmation_threshold = confirmation_threshold
        self._history: LabelHistory = ()

    @property
    def history(self) -> LabelHistory:
        return self._history

    def filter(self, label: BinaryLabel) -> BinaryLabel:
        self._history, smoothed = debounce(
            self._history, label, self.history_size, self.confirmation_threshold
        )
        return smoothed

    def reset(self):
        self._history = ()
