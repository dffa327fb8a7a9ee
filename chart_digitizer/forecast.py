# chart_digitizer/forecast.py
import logging
import math
from typing import Callable, NamedTuple

import numpy as np

from .config import ForecastConfig
from .errors import InsufficientSeriesError
from .types import DomainPoint, PredictionResult
from .validators import validate_weights

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86_400.0

Predictor = Callable[[float], float]
FitFn = Callable[[np.ndarray, np.ndarray, ForecastConfig], Predictor]


class ModelSpec(NamedTuple):
    name: str
    weight: float
    fit: FitFn


# ---------- Models ----------
def fit_linear(days: np.ndarray, prices: np.ndarray, cfg: ForecastConfig) -> Predictor:
    return np.poly1d(np.polyfit(days, prices, 1))


def fit_polynomial(days: np.ndarray, prices: np.ndarray, cfg: ForecastConfig) -> Predictor:
    degree = min(cfg.polynomial_degree, len(days) - 1)
    if degree < cfg.polynomial_degree:
        logger.warning(
            "Polynomial degree reduced from %d to %d for %d points",
            cfg.polynomial_degree,
            degree,
            len(days),
        )
    return np.poly1d(np.polyfit(days, prices, degree))


def fit_recent_trend(days: np.ndarray, prices: np.ndarray, cfg: ForecastConfig) -> Predictor:
    """Least-squares line over the last ``recent_window`` points."""
    recent_days = days[-cfg.recent_window :]
    recent_prices = prices[-cfg.recent_window :]
    if len(recent_days) < 2:
        last = float(prices[-1])
        return lambda _day: last
    return np.poly1d(np.polyfit(recent_days, recent_prices, 1))


MODEL_FITTERS: dict[str, FitFn] = {
    "linear": fit_linear,
    "polynomial": fit_polynomial,
    "moving_average": fit_recent_trend,
}


def build_models(cfg: ForecastConfig) -> list[ModelSpec]:
    """Registry order, weighted by ``cfg.weights``."""
    validate_weights(cfg.weights)
    unknown = set(cfg.weights) - set(MODEL_FITTERS)
    if unknown:
        raise ValueError(f"No model registered for weights: {sorted(unknown)}")
    return [
        ModelSpec(name, cfg.weights[name], fit)
        for name, fit in MODEL_FITTERS.items()
        if name in cfg.weights
    ]


# ---------- Ensemble ----------
def ensemble_confidence(
    predictions: dict[str, float], weights: dict[str, float]
) -> tuple[float, float, float]:
    """Return ``(ensemble, std_dev, confidence)``.

    ``std_dev`` is the population spread of the predictions around the
    weighted ensemble; confidence is ``100 - std_dev`` floored at zero.
    """
    ensemble = sum(weights[name] * value for name, value in predictions.items())
    variance = sum((v - ensemble) ** 2 for v in predictions.values()) / len(predictions)
    std_dev = math.sqrt(variance)
    confidence = max(0.0, 100.0 - std_dev)
    return ensemble, std_dev, confidence


class ForecastEngine:
    """
    Weighted ensemble of trend models over a (timestamp, price) series.

    Timestamps are rescaled to days since the first point before fitting.

    Parameters
    ----------
    config : ForecastConfig | None
        Polynomial degree, recent-trend window and ensemble weights.
    models : list[ModelSpec] | None
        Overrides the registry built from ``config``.
    """

    def __init__(self, config: ForecastConfig | None = None, models: list[ModelSpec] | None = None):
        self.config = config or ForecastConfig()
        self.models = models if models is not None else build_models(self.config)
        validate_weights({m.name: m.weight for m in self.models})

    def predict(self, series: list[DomainPoint], target_timestamp: float) -> PredictionResult:
        if len(series) < 2:
            raise InsufficientSeriesError(len(series), 2)

        t0 = series[0].timestamp
        days = np.array([(p.timestamp - t0) / SECONDS_PER_DAY for p in series])
        prices = np.array([p.price for p in series], dtype=np.float64)
        target_day = (target_timestamp - t0) / SECONDS_PER_DAY

        per_model = {
            m.name: float(m.fit(days, prices, self.config)(target_day)) for m in self.models
        }
        weights = {m.name: m.weight for m in self.models}
        ensemble, std_dev, confidence = ensemble_confidence(per_model, weights)

        logger.info(
            "Forecast at day %.2f: ensemble=%.4f confidence=%.2f per_model=%s",
            target_day,
            ensemble,
            confidence,
            per_model,
        )
        return PredictionResult(
            ensemble=ensemble, per_model=per_model, confidence=confidence, std_dev=std_dev
        )
