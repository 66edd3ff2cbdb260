"""
Ranking of an external classifier's probability vector.
The network itself runs elsewhere; this only sorts and formats its output.
"""

from typing import Dict, List, Optional, Sequence, Union

from faceprop.core.exceptions import ValidationError
from faceprop.models.domain.metric import Prediction


def _as_fraction(value: float, percent: bool) -> float:
    return value / 100.0 if percent else value


def rank_predictions(
    probabilities: Union[Dict[str, float], Sequence[float]],
    labels: Optional[Sequence[str]] = None,
    top_k: Optional[int] = None,
) -> List[Prediction]:
    """
    Sort a probability vector, highest first. Ties keep input order.

    Args:
        probabilities: label -> probability mapping, or a sequence paired with `labels`
        labels: class labels when `probabilities` is a sequence
        top_k: keep only the first K entries (0 keeps none, None keeps all)

    Values above 1 are read as percentages (softmax * 100 output).
    """
    if isinstance(probabilities, dict):
        pairs = list(probabilities.items())
    else:
        if labels is None or len(labels) != len(probabilities):
            raise ValidationError("labels must match the probability vector length", field="labels")
        pairs = list(zip(labels, probabilities))

    if top_k is not None and top_k < 0:
        raise ValidationError("top_k must be non-negative", field="top_k")

    if any(p < 0 for _, p in pairs):
        raise ValidationError("Probabilities must be non-negative", field="probabilities")

    percent = any(p > 1.0 for _, p in pairs)
    if percent and any(p > 100.0 for _, p in pairs):
        raise ValidationError("Percentages must not exceed 100", field="probabilities")
    ranked = sorted(
        (Prediction(label=label, probability=_as_fraction(float(p), percent)) for label, p in pairs),
        key=lambda pred: pred.probability,
        reverse=True,
    )
    return ranked[:top_k] if top_k is not None else ranked


def format_predictions(predictions: Sequence[Prediction], places: int = 1) -> List[str]:
    """Render predictions as 'label: 87.5%' strings."""
    return [f"{p.label}: {p.percentage:.{places}f}%" for p in predictions]
