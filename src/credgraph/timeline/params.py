from __future__ import annotations

import math
import numbers
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional, Union

from credgraph.errors import InvalidParameterError

DEFAULT_ALPHA = 0.05
DEFAULT_INTERVAL_DECAY = 0.5


def check_alpha(alpha: float) -> float:
    if not isinstance(alpha, numbers.Real) or not math.isfinite(alpha) or not 0.0 < alpha < 1.0:
        raise InvalidParameterError(f"alpha must be in (0, 1), got {alpha!r}")
    return float(alpha)


def check_interval_decay(interval_decay: float) -> float:
    if (
        not isinstance(interval_decay, numbers.Real)
        or not math.isfinite(interval_decay)
        or not 0.0 <= interval_decay <= 1.0
    ):
        raise InvalidParameterError(
            f"interval_decay must be in [0, 1], got {interval_decay!r}"
        )
    return float(interval_decay)


@dataclass(frozen=True)
class TimelineCredParameters:
    """
    The two user-facing levers of a cred computation.

    alpha:
        Teleportation probability of the random walk, in (0, 1).
    interval_decay:
        Fraction of seed weight, edge weight and converged score that
        carries from one interval into the next, in [0, 1].
    """

    alpha: float = DEFAULT_ALPHA
    interval_decay: float = DEFAULT_INTERVAL_DECAY

    def __post_init__(self) -> None:
        object.__setattr__(self, "alpha", check_alpha(self.alpha))
        object.__setattr__(
            self, "interval_decay", check_interval_decay(self.interval_decay)
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


ParamsLike = Union[TimelineCredParameters, Mapping[str, Any]]


def coerce_params(params: Optional[ParamsLike]) -> TimelineCredParameters:
    """
    Accept parameters as the dataclass or as a plain mapping.

    Mappings may use ``interval_decay`` or the camelCase ``intervalDecay``.
    """
    if params is None:
        return TimelineCredParameters()
    if isinstance(params, TimelineCredParameters):
        return params
    if isinstance(params, Mapping):
        unknown = set(params) - {"alpha", "interval_decay", "intervalDecay"}
        if unknown:
            raise InvalidParameterError(f"unknown parameters: {sorted(unknown)}")
        return TimelineCredParameters(
            alpha=params.get("alpha", DEFAULT_ALPHA),
            interval_decay=params.get(
                "interval_decay",
                params.get("intervalDecay", DEFAULT_INTERVAL_DECAY),
            ),
        )
    raise InvalidParameterError(f"unsupported parameters object: {params!r}")
