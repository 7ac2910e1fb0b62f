"""Adapter for probabilistic estimators exposing predict_proba() and classes_."""

import numpy as np
import logging

from repcounter.core.classification_gate import ClassifierOutput
from repcounter.core.errors import ClassifierError

logger = logging.getLogger(__name__)


class ProbabilisticModelClassifier:
    """
    Wraps a scikit-learn style estimator.

    The (6, window_size) window is flattened into one feature row. The
    auxiliary state is accepted for interface compatibility and ignored,
    since these estimators carry no recurrent state.
    """

    def __init__(self, model):
        if not hasattr(model, "predict_proba") or not hasattr(model, "classes_"):
            raise TypeError("model must expose predict_proba() and classes_")
        self.model = model

    def predict(self, window: np.ndarray, aux_state: np.ndarray) -> ClassifierOutput:
        features = np.asarray(window, dtype=np.float64).reshape(1, -1)
        try:
            proba = np.asarray(self.model.predict_proba(features))[0]
        except Exception as e:
            raise ClassifierError(f"{type(self.model).__name__}.predict_proba failed: {e}") from e

        classes = [str(c) for c in self.model.classes_]
        if len(classes) != len(proba):
            raise ClassifierError(
                f"Model returned {len(proba)} probabilities for {len(classes)} classes"
            )
        top = int(np.argmax(proba))
        return ClassifierOutput(
            label=classes[top],
            probabilities={c: float(p) for c, p in zip(classes, proba)},
        )
