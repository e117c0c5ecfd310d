"""Built-in probability distributions for pplcore."""

import math
from typing import Dict, Optional, Sequence, Type

import numpy as np

LOG_2PI = math.log(2 * math.pi)


def _log(x: float) -> float:
    """Natural log that maps 0 to -inf instead of raising."""
    return math.log(x) if x > 0 else -math.inf


class Distribution:
    """
    Base class for the built-in distribution families.

    Subclasses draw with `sample(rng)` from an explicit numpy Generator and
    score a point with `log_prob(x)`, which is -inf outside the support.
    """

    name = "distribution"
    arity = 0

    @classmethod
    def validate(cls, *params: float) -> Optional[str]:
        """Return an error message for invalid parameters, or None."""
        if len(params) != cls.arity:
            return f"{cls.name} expects {cls.arity} argument(s), got {len(params)}"
        for p in params:
            if not math.isfinite(p):
                return f"{cls.name} parameters must be finite, got {p:g}"
        return None

    def sample(self, rng: np.random.Generator) -> float:
        raise NotImplementedError

    def log_prob(self, x: float) -> float:
        raise NotImplementedError

    @property
    def params(self) -> tuple:
        raise NotImplementedError

    @property
    def mean(self) -> float:
        raise NotImplementedError

    @property
    def variance(self) -> float:
        raise NotImplementedError

    def _check(self, *params: float):
        error = self.validate(*params)
        if error is not None:
            raise ValueError(error)

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.params == other.params

    def __hash__(self) -> int:
        return hash((type(self), self.params))

    def __repr__(self) -> str:
        return f"{self.name}({', '.join(f'{p:g}' for p in self.params)})"


class Normal(Distribution):
    """Normal (Gaussian) distribution with mean `mu` and standard deviation `sigma`."""

    name = "normal"
    arity = 2

    def __init__(self, mu: float, sigma: float):
        self._check(mu, sigma)
        self.mu = float(mu)
        self.sigma = float(sigma)

    @classmethod
    def validate(cls, *params: float) -> Optional[str]:
        error = super().validate(*params)
        if error is None and not params[1] > 0:
            error = f"normal stddev must be > 0, got {params[1]:g}"
        return error

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.normal(self.mu, self.sigma))

    def log_prob(self, x: float) -> float:
        z = (x - self.mu) / self.sigma
        return -0.5 * LOG_2PI - math.log(self.sigma) - 0.5 * z * z

    @property
    def params(self) -> tuple:
        return (self.mu, self.sigma)

    @property
    def mean(self) -> float:
        return self.mu

    @property
    def variance(self) -> float:
        return self.sigma ** 2


class Uniform(Distribution):
    """Continuous uniform distribution on the closed interval [a, b]."""

    name = "uniform"
    arity = 2

    def __init__(self, a: float, b: float):
        self._check(a, b)
        self.a = float(a)
        self.b = float(b)

    @classmethod
    def validate(cls, *params: float) -> Optional[str]:
        error = super().validate(*params)
        if error is None and not params[0] < params[1]:
            error = f"uniform requires min < max, got min={params[0]:g}, max={params[1]:g}"
        return error

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.uniform(self.a, self.b))

    def log_prob(self, x: float) -> float:
        if self.a <= x <= self.b:
            return -math.log(self.b - self.a)
        return -math.inf

    @property
    def params(self) -> tuple:
        return (self.a, self.b)

    @property
    def mean(self) -> float:
        return (self.a + self.b) / 2

    @property
    def variance(self) -> float:
        return ((self.b - self.a) ** 2) / 12


class Bernoulli(Distribution):
    """Bernoulli distribution (coin flip) returning 1.0 with probability p."""

    name = "bernoulli"
    arity = 1

    def __init__(self, p: float):
        self._check(p)
        self.p = float(p)

    @classmethod
    def validate(cls, *params: float) -> Optional[str]:
        error = super().validate(*params)
        if error is None and not 0 <= params[0] <= 1:
            error = f"bernoulli p must be in [0, 1], got {params[0]:g}"
        return error

    def sample(self, rng: np.random.Generator) -> float:
        return 1.0 if rng.random() < self.p else 0.0

    def log_prob(self, x: float) -> float:
        if x == 1:
            return _log(self.p)
        if x == 0:
            return _log(1 - self.p)
        return -math.inf

    @property
    def params(self) -> tuple:
        return (self.p,)

    @property
    def mean(self) -> float:
        return self.p

    @property
    def variance(self) -> float:
        return self.p * (1 - self.p)


class Exponential(Distribution):
    """Exponential distribution with rate `lam`."""

    name = "exponential"
    arity = 1

    def __init__(self, lam: float):
        self._check(lam)
        self.lam = float(lam)

    @classmethod
    def validate(cls, *params: float) -> Optional[str]:
        error = super().validate(*params)
        if error is None and not params[0] > 0:
            error = f"exponential lambda must be > 0, got {params[0]:g}"
        return error

    def sample(self, rng: np.random.Generator) -> float:
        # numpy parameterizes by scale = 1 / rate
        return float(rng.exponential(1 / self.lam))

    def log_prob(self, x: float) -> float:
        if x < 0:
            return -math.inf
        return math.log(self.lam) - self.lam * x

    @property
    def params(self) -> tuple:
        return (self.lam,)

    @property
    def mean(self) -> float:
        return 1 / self.lam

    @property
    def variance(self) -> float:
        return 1 / self.lam ** 2


DISTRIBUTIONS: Dict[str, Type[Distribution]] = {
    cls.name: cls for cls in (Normal, Uniform, Bernoulli, Exponential)
}


def make_distribution(name: str, params: Sequence[float]) -> Distribution:
    """
    Validate `params` for the family `name`, then construct it.

    Raises KeyError for an unknown family and ValueError for bad parameters.
    """
    cls = DISTRIBUTIONS[name]
    error = cls.validate(*params)
    if error is not None:
        raise ValueError(error)
    return cls(*params)
