"""
pplcore: a small probabilistic programming language.

Programs are straight-line models built from arithmetic, assignments,
`sample` and `observe`. They are lexed and parsed once, then executed many
times by an Interpreter under rejection or importance sampling.
"""

# Language front end
from .core import (
    Lexer,
    Token,
    TokenKind,
    tokenize,
    Node,
    Program,
    Assignment,
    BinaryExpression,
    NumberLiteral,
    Variable,
    FunctionCall,
    Error,
    Parser,
    parse,
)

# Built-in distributions
from .distributions import (
    Distribution,
    Normal,
    Uniform,
    Bernoulli,
    Exponential,
    make_distribution,
)

from .errors import PPLError, LexError, ParseError, PPLRuntimeError, InferenceError
from .interpreter import Interpreter, ExecutionResult, Observation
from .inference import (
    InferenceAlgorithm,
    RejectionSampling,
    ImportanceSampling,
    SamplingState,
    Statistics,
    RejectionSummary,
    ImportanceSummary,
)

# Utilities
from .utils import (
    compile_program,
    pretty,
    summarize,
    check_deterministic,
    parse_condition,
)

__version__ = "0.1.0"

__all__ = [
    # Front end
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    "Node",
    "Program",
    "Assignment",
    "BinaryExpression",
    "NumberLiteral",
    "Variable",
    "FunctionCall",
    "Error",
    "Parser",
    "parse",
    # Distributions
    "Distribution",
    "Normal",
    "Uniform",
    "Bernoulli",
    "Exponential",
    "make_distribution",
    # Errors
    "PPLError",
    "LexError",
    "ParseError",
    "PPLRuntimeError",
    "InferenceError",
    # Execution and inference
    "Interpreter",
    "ExecutionResult",
    "Observation",
    "InferenceAlgorithm",
    "RejectionSampling",
    "ImportanceSampling",
    "SamplingState",
    "Statistics",
    "RejectionSummary",
    "ImportanceSummary",
    # Utilities
    "compile_program",
    "pretty",
    "summarize",
    "check_deterministic",
    "parse_condition",
]
