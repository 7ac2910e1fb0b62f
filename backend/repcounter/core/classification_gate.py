"""
Confidence-gated reduction of classifier output to a binary label.

The classifier is opaque: it receives a window plus an auxiliary state
vector and reports its top label with a per-label confidence mapping.
The gate only trusts the classifier's own top label, and only when the
reported confidence for that label clears the threshold. Everything else,
including classifier failure, becomes OTHER so a rep is never counted on
bad input.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Optional
from enum import Enum
import logging

from repcounter.core.errors import ClassifierError
from repcounter.core.window_buffer import Window

logger = logging.getLogger(__name__)


class BinaryLabel(Enum):
    """Reduced classification result."""
    TARGET = "target"
    OTHER = "other"


@dataclass(frozen=True)
class ClassifierOutput:
    """Top label plus confidence for every known label."""
    label: str
    probabilities: Dict[str, float] = field(default_factory=dict)

    @property
    def confidence(self) -> Optional[float]:
        """Confidence reported for the top label, None if missing."""
        return self.probabilities.get(self.label)


def gate_prediction(
    output: ClassifierOutput,
    target_label: str,
    confidence_threshold: float
) -> BinaryLabel:
    """
    Reduce a classifier output to TARGET/OTHER.

    Low or missing confidence on the top label forces OTHER even if another
    label scored above the threshold.
    """
    confidence = output.confidence
    if confidence is None:
        return BinaryLabel.OTHER
    if confidence < confidence_threshold:
        return BinaryLabel.OTHER
    if output.label == target_label:
        return BinaryLabel.TARGET
    return BinaryLabel.OTHER


def make_aux_state(size: int) -> np.ndarray:
    """All-zero auxiliary state vector, read-only."""
    state = np.zeros(size, dtype=np.float64)
    state.setflags(write=False)
    return state


@dataclass(frozen=True)
class GateResult:
    """Outcome of classifying one window."""
    label: BinaryLabel
    output: Optional[ClassifierOutput] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class ClassificationGate:
    """
    Runs the classifier on completed windows and applies the confidence gate.

    The same auxiliary state array is passed on every call; the classifier is
    treated as stateless across windows.
    """

    def __init__(
        self,
        classifier,
        target_label: str,
        confidence_threshold: float = 0.50,
        aux_state_size: int = 400
    ):
        self.classifier = classifier
        self.target_label = target_label
        self.confidence_threshold = confidence_threshold
        self.aux_state = make_aux_state(aux_state_size)

    def evaluate(self, window: Window) -> GateResult:
        """Classify a window and keep the raw output for diagnostics."""
        try:
            output = self.classifier.predict(window.data, self.aux_state)
        except ClassifierError as e:
            return self._failed(window, str(e))
        except Exception as e:
            logger.exception(f"Unexpected classifier failure on window {window.sequence}")
            return self._failed(window, str(e))

        label = gate_prediction(output, self.target_label, self.confidence_threshold)
        logger.debug(
            f"Window {window.sequence}: top={output.label} "
            f"conf={output.confidence} -> {label.value}"
        )
        return GateResult(label=label, output=output)

    def classify(self, window: Window) -> BinaryLabel:
        return self.evaluate(window).label

    def _failed(self, window: Window, message: str) -> GateResult:
        logger.warning(f"Prediction error on window {window.sequence}: {message}")
        return GateResult(label=BinaryLabel.OTHER, error=message)
