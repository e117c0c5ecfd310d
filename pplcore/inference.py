"""
Sampling-based inference over pplcore programs.

Both algorithms drive an Interpreter through repeated reset + run cycles.
Runs are sequential, so with a seeded interpreter the stored sample order
is reproducible.
"""

import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import numpy as np

from .errors import InferenceError, PPLRuntimeError
from .interpreter import ExecutionResult, Interpreter

log = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1000
DEFAULT_ATTEMPT_FACTOR = 100
ON_ERROR_POLICIES = ("raise", "skip")

Condition = Callable[[ExecutionResult], bool]


class SamplingState(Enum):
    IDLE = "idle"
    SAMPLING = "sampling"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Statistics:
    """Summary of one variable. Every field is None when no sample binds it."""

    mean: Optional[float] = None
    std_dev: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None

    def to_dict(self) -> dict:
        return {"mean": self.mean, "stdDev": self.std_dev, "min": self.min, "max": self.max}


@dataclass(frozen=True)
class RejectionSummary:
    acceptance_rate: float
    attempts: int
    accepted: int
    success: bool
    state: SamplingState
    failures: int = 0


@dataclass(frozen=True)
class ImportanceSummary:
    effective_sample_size: float
    ess_ratio: float
    state: SamplingState
    failures: int = 0


class InferenceAlgorithm:
    """
    Base class for inference algorithms.

    Owns the ordered sample collection and the parallel list of per-sample
    total log-probabilities. `on_error` decides what a PPLRuntimeError in a
    single run does: "raise" aborts the whole inference run, "skip" logs it
    and moves on to the next run.
    """

    def __init__(self, interpreter: Interpreter, on_error: str = "raise"):
        if on_error not in ON_ERROR_POLICIES:
            raise InferenceError(f"on_error must be one of {ON_ERROR_POLICIES}, got {on_error!r}")
        self.interpreter = interpreter
        self.on_error = on_error
        self.samples: List[ExecutionResult] = []
        self.log_probabilities: List[float] = []
        self.failures = 0
        self.state = SamplingState.IDLE

    def run(self, num_samples: int):
        raise NotImplementedError

    def get_samples(self) -> List[ExecutionResult]:
        return self.samples

    def get_statistics(self, variable_name: str) -> Statistics:
        """Unweighted mean, population standard deviation, min and max."""
        _, values = self._values(variable_name)
        if values.size == 0:
            return Statistics()
        return Statistics(
            mean=float(np.mean(values)),
            std_dev=float(np.std(values)),
            min=float(np.min(values)),
            max=float(np.max(values)),
        )

    def to_record(self) -> dict:
        """The result record consumed by reporting tools."""
        return {
            "algorithm": type(self).__name__,
            "numSamples": len(self.samples),
            "samples": [s.to_dict() for s in self.samples],
            "logProbabilities": list(self.log_probabilities),
        }

    def save_results(self, filename) -> Path:
        """Write `to_record()` as indented JSON and return the resolved path."""
        output_path = Path(filename).resolve()
        with open(output_path, "w") as f:
            json.dump(self.to_record(), f, indent=2)
        log.info("Results saved to %s", output_path)
        return output_path

    def _reset(self):
        self.samples = []
        self.log_probabilities = []
        self.failures = 0
        self.state = SamplingState.SAMPLING

    def _run_once(self) -> Optional[ExecutionResult]:
        self.interpreter.reset_state()
        try:
            return self.interpreter.run()
        except PPLRuntimeError as e:
            if self.on_error == "raise":
                self.state = SamplingState.IDLE
                raise
            self.failures += 1
            log.warning("Skipping failed run: %s", e)
            return None

    def _values(self, variable_name: str) -> Tuple[np.ndarray, np.ndarray]:
        """Indices of the samples that bind `variable_name`, and their values."""
        pairs = [
            (i, s.variables[variable_name])
            for i, s in enumerate(self.samples)
            if variable_name in s.variables
        ]
        indices = np.array([i for i, _ in pairs], dtype=int)
        values = np.array([v for _, v in pairs], dtype=float)
        return indices, values

    @staticmethod
    def _check_count(name: str, value: int):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
            raise InferenceError(f"{name} must be a positive integer, got {value!r}")


class RejectionSampling(InferenceAlgorithm):
    """
    Keeps the runs accepted by `condition` until `num_samples` are collected
    or `max_attempts` runs have been made.

    With no condition every run is accepted.
    """

    def __init__(self, interpreter: Interpreter, condition: Optional[Condition] = None, on_error: str = "raise"):
        super().__init__(interpreter, on_error)
        self.condition = condition if condition is not None else (lambda result: True)
        self.attempts = 0
        self.accepted_count = 0

    @property
    def acceptance_rate(self) -> float:
        return self.accepted_count / self.attempts if self.attempts else 0.0

    def run(self, num_samples: int, max_attempts: Optional[int] = None) -> RejectionSummary:
        self._check_count("num_samples", num_samples)
        if max_attempts is None:
            max_attempts = num_samples * DEFAULT_ATTEMPT_FACTOR
        self._check_count("max_attempts", max_attempts)

        self._reset()
        self.attempts = 0
        self.accepted_count = 0
        log.info("Starting rejection sampling to collect %d samples...", num_samples)

        while self.accepted_count < num_samples and self.attempts < max_attempts:
            result = self._run_once()
            self.attempts += 1

            if self.attempts % PROGRESS_INTERVAL == 0:
                log.info("Attempts: %d, Accepted: %d", self.attempts, self.accepted_count)

            if result is not None and self.condition(result):
                self.samples.append(result)
                self.log_probabilities.append(result.total_log_prob)
                self.accepted_count += 1

        success = self.accepted_count >= num_samples
        self.state = SamplingState.CONVERGED if success else SamplingState.EXHAUSTED
        log.info(
            "Rejection sampling completed: attempts=%d accepted=%d acceptance rate=%.2f%%",
            self.attempts, self.accepted_count, self.acceptance_rate * 100,
        )
        if not success:
            log.warning(
                "Attempt budget of %d exhausted with %d/%d samples accepted",
                max_attempts, self.accepted_count, num_samples,
            )

        return RejectionSummary(
            acceptance_rate=self.acceptance_rate,
            attempts=self.attempts,
            accepted=self.accepted_count,
            success=success,
            state=self.state,
            failures=self.failures,
        )


class ImportanceSampling(InferenceAlgorithm):
    """
    Self-normalized importance sampling with the prior as proposal.

    Every run is kept and weighted by exp(total log-probability).
    """

    def __init__(self, interpreter: Interpreter, on_error: str = "raise"):
        super().__init__(interpreter, on_error)
        self.weights: List[float] = []
        self.normalized_weights: List[float] = []
        self.effective_sample_size = 0.0

    def run(self, num_samples: int) -> ImportanceSummary:
        self._check_count("num_samples", num_samples)
        self._reset()
        self.weights = []
        self.normalized_weights = []
        log.info("Starting importance sampling to collect %d samples...", num_samples)

        for i in range(num_samples):
            result = self._run_once()
            if result is not None:
                self.samples.append(result)
                self.log_probabilities.append(result.total_log_prob)
                self.weights.append(self._raw_weight(result.total_log_prob))

            if (i + 1) % PROGRESS_INTERVAL == 0:
                log.info("Generated %d/%d samples", i + 1, num_samples)

        if not self.samples:
            self.state = SamplingState.IDLE
            raise InferenceError(f"All {num_samples} runs failed")

        self.normalized_weights = self._normalize(self.log_probabilities)
        w = np.asarray(self.normalized_weights)
        self.effective_sample_size = float(1 / np.sum(w * w))
        ess_ratio = self.effective_sample_size / len(self.samples)
        self.state = SamplingState.COMPLETED

        log.info(
            "Importance sampling completed: samples=%d effective sample size=%.2f ESS ratio=%.2f%%",
            len(self.samples), self.effective_sample_size, ess_ratio * 100,
        )
        return ImportanceSummary(
            effective_sample_size=self.effective_sample_size,
            ess_ratio=ess_ratio,
            state=self.state,
            failures=self.failures,
        )

    def get_weighted_statistics(self, variable_name: str) -> Statistics:
        """Weighted mean and standard deviation; min and max are unweighted."""
        indices, values = self._values(variable_name)
        if values.size == 0:
            return Statistics()
        w = np.asarray(self.normalized_weights)[indices]
        if len(indices) < len(self.samples):
            w = w / np.sum(w)
        mean = float(np.sum(values * w))
        variance = float(np.sum((values - mean) ** 2 * w))
        return Statistics(
            mean=mean,
            std_dev=math.sqrt(variance),
            min=float(np.min(values)),
            max=float(np.max(values)),
        )

    @staticmethod
    def _raw_weight(log_prob: float) -> float:
        # exp overflows to inf rather than raising
        with np.errstate(over="ignore"):
            return float(np.exp(np.float64(log_prob)))

    @staticmethod
    def _normalize(log_probs: List[float]) -> List[float]:
        # Shifting by the max log-prob leaves w_i / sum(w) unchanged but avoids underflow
        lp = np.asarray(log_probs, dtype=float)
        top = np.max(lp)
        if top == -np.inf:
            raise InferenceError("Every sample has zero weight (total log prob is -inf)")
        w = np.exp(lp - top)
        return (w / np.sum(w)).tolist()
