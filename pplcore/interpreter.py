"""Tree-walking interpreter for pplcore programs."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union

import numpy as np

from .core.nodes import (
    Assignment,
    BinaryExpression,
    Error,
    FunctionCall,
    Node,
    NumberLiteral,
    Program,
    Variable,
)
from .distributions import DISTRIBUTIONS, Distribution
from .errors import PPLRuntimeError

log = logging.getLogger(__name__)

Value = Union[float, Distribution]


@dataclass(frozen=True)
class Observation:
    """One `observe` call: the scored value, its distribution family, and the log-density."""

    value: float
    distribution: str
    log_prob: float

    def to_dict(self) -> dict:
        return {"value": self.value, "distribution": self.distribution, "logProb": self.log_prob}


@dataclass
class ExecutionResult:
    """The outcome of one run. Created fresh per run and never shared between runs."""

    last_value: Optional[Value] = None
    variables: Dict[str, float] = field(default_factory=dict)
    total_log_prob: float = 0.0
    observations: List[Observation] = field(default_factory=list)

    def to_dict(self) -> dict:
        last = self.last_value
        if isinstance(last, Distribution):
            last = repr(last)
        return {
            "lastValue": last,
            "variables": dict(self.variables),
            "totalLogProb": self.total_log_prob,
            "observations": [o.to_dict() for o in self.observations],
        }


def _arith(op: str, left: float, right: float) -> float:
    # numpy float64 keeps IEEE-754 semantics: 1/0 -> inf, 0/0 -> nan
    x, y = np.float64(left), np.float64(right)
    with np.errstate(all="ignore"):
        if op == "+":
            return float(x + y)
        if op == "-":
            return float(x - y)
        if op == "*":
            return float(x * y)
        if op == "/":
            return float(x / y)
    raise PPLRuntimeError(f"Unknown operator '{op}'")


def _ieee(fn: Callable) -> Callable[[float], float]:
    def apply(x: float) -> float:
        with np.errstate(all="ignore"):
            return float(fn(np.float64(x)))
    return apply


MATH_FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "exp": _ieee(np.exp),
    "log": _ieee(np.log),
    "sqrt": _ieee(np.sqrt),
    "abs": _ieee(np.abs),
}


class Interpreter:
    """
    Executes a parsed Program against a fresh environment.

    The AST is only read, so one Program may back any number of interpreters.
    Randomness comes from a numpy Generator owned by this instance: pass
    `seed` for reproducible runs, or `rng` to supply a generator. With
    neither, the generator is unseeded.
    """

    def __init__(self, ast: Node, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        if isinstance(ast, Error):
            raise PPLRuntimeError(f"Cannot interpret a program that failed to parse: {ast.message}")
        if not isinstance(ast, Program):
            raise PPLRuntimeError(f"Expected a Program node, got {type(ast).__name__}")
        self.ast = ast
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.builtins: Dict[str, Callable[[FunctionCall], Value]] = {
            "sample": self._sample,
            "observe": self._observe,
        }
        self.reset_state()

    def reset_state(self):
        """Drop every binding, the log-probability total and the observation log."""
        self.variables: Dict[str, float] = {}
        self.total_log_prob = 0.0
        self.observations: List[Observation] = []

    def run(self) -> ExecutionResult:
        """Evaluate each statement in order and return this run's result."""
        last_value = None
        for statement in self.ast.statements:
            last_value = self.evaluate(statement)
        log.debug(
            "Run finished: %d statement(s), total log prob %g",
            len(self.ast.statements), self.total_log_prob,
        )
        return ExecutionResult(
            last_value=last_value,
            variables=dict(self.variables),
            total_log_prob=self.total_log_prob,
            observations=list(self.observations),
        )

    def evaluate(self, node: Node) -> Value:
        if isinstance(node, NumberLiteral):
            return float(node.value)

        if isinstance(node, Variable):
            if node.name not in self.variables:
                raise PPLRuntimeError(f"Undefined variable '{node.name}'")
            return self.variables[node.name]

        if isinstance(node, BinaryExpression):
            left = self._number(self.evaluate(node.left), f"left operand of '{node.op}'")
            right = self._number(self.evaluate(node.right), f"right operand of '{node.op}'")
            return _arith(node.op, left, right)

        if isinstance(node, FunctionCall):
            return self.call(node)

        if isinstance(node, Assignment):
            value = self._number(self.evaluate(node.expr), f"value assigned to '{node.name}'")
            self.variables[node.name] = value
            return value

        raise PPLRuntimeError(f"Unknown node type {type(node).__name__}")

    def call(self, node: FunctionCall) -> Value:
        if node.name in self.builtins:
            return self.builtins[node.name](node)

        if node.name in DISTRIBUTIONS:
            cls = DISTRIBUTIONS[node.name]
            params = [self._number(self.evaluate(a), f"argument to {node.name}") for a in node.args]
            error = cls.validate(*params)
            if error is not None:
                raise PPLRuntimeError(error)
            return cls(*params)

        if node.name in MATH_FUNCTIONS:
            self._check_arity(node, 1)
            return MATH_FUNCTIONS[node.name](
                self._number(self.evaluate(node.args[0]), f"argument to {node.name}")
            )

        raise PPLRuntimeError(f"Unknown function '{node.name}'")

    def _sample(self, node: FunctionCall) -> float:
        self._check_arity(node, 1)
        dist = self._distribution(self.evaluate(node.args[0]), "sample")
        return dist.sample(self.rng)

    def _observe(self, node: FunctionCall) -> float:
        self._check_arity(node, 2)
        value = self._number(self.evaluate(node.args[0]), "observed value")
        dist = self._distribution(self.evaluate(node.args[1]), "observe")
        log_prob = dist.log_prob(value)
        self.observations.append(Observation(value, dist.name, log_prob))
        self.total_log_prob += log_prob
        return log_prob

    @staticmethod
    def _check_arity(node: FunctionCall, expected: int):
        if len(node.args) != expected:
            raise PPLRuntimeError(
                f"{node.name} expects {expected} argument(s), got {len(node.args)}"
            )

    @staticmethod
    def _number(value: Value, what: str) -> float:
        if isinstance(value, Distribution):
            raise PPLRuntimeError(f"Expected a number for {what}, got distribution {value!r}")
        return value

    @staticmethod
    def _distribution(value: Value, what: str) -> Distribution:
        if not isinstance(value, Distribution):
            raise PPLRuntimeError(f"{what} expects a distribution, got {value!r}")
        return value
