"""Utility functions for pplcore."""

import re
from typing import Callable, Dict

from .core import (
    Assignment, BinaryExpression, Error, FunctionCall,
    Node, NumberLiteral, Program, Variable, parse, tokenize,
)
from .errors import ParseError


def compile_program(source: str) -> Program:
    """
    Lex and parse `source` into a Program.

    Raises LexError for bad characters and ParseError when the parser
    returns an Error node.
    """
    ast = parse(tokenize(source))
    if isinstance(ast, Error):
        raise ParseError(ast.message)
    return ast


def _children(node: Node) -> list:
    if isinstance(node, Program):
        return list(node.statements)
    if isinstance(node, Assignment):
        return [node.expr]
    if isinstance(node, BinaryExpression):
        return [node.left, node.right]
    if isinstance(node, FunctionCall):
        return list(node.args)
    if isinstance(node, (NumberLiteral, Variable, Error)):
        return []
    raise ValueError(f"Unknown node type {node}")


def _label(node: Node) -> str:
    if isinstance(node, Program):
        return "Program"
    if isinstance(node, Assignment):
        return f"Assignment({node.name})"
    if isinstance(node, BinaryExpression):
        return f"BinaryExpression({node.op})"
    if isinstance(node, FunctionCall):
        return f"FunctionCall({node.name})"
    if isinstance(node, NumberLiteral):
        return f"NumberLiteral({node.value:g})"
    if isinstance(node, Variable):
        return f"Variable({node.name})"
    if isinstance(node, Error):
        return f"Error({node.message})"
    raise ValueError(f"Unknown node type {node}")


def pretty(node: Node, indent: int = 0, is_last: bool = True, prefix: str = "") -> str:
    """
    Pretty-print an AST as an indented tree.

    Example output for `x = sample(normal(0, 1))`:
        Program
        └─ Assignment(x)
           └─ FunctionCall(sample)
              └─ FunctionCall(normal)
                 ├─ NumberLiteral(0)
                 └─ NumberLiteral(1)
    """
    if indent == 0:
        connector = ""
        child_prefix = ""
    else:
        connector = "└─ " if is_last else "├─ "
        child_prefix = prefix + ("   " if is_last else "│  ")

    lines = [f"{prefix}{connector}{_label(node)}"]
    children = _children(node)
    for i, child in enumerate(children):
        lines.append(pretty(child, indent + 1, i == len(children) - 1, child_prefix))
    return "\n".join(lines)


def summarize(node: Node) -> Dict[str, int]:
    """Counts of each node type in the tree."""
    counts = {}

    def walk(n):
        name = type(n).__name__
        counts[name] = counts.get(name, 0) + 1
        for child in _children(n):
            walk(child)

    walk(node)
    return counts


def check_deterministic(node: Node) -> bool:
    """True if no `sample` call is reachable from `node`."""
    if isinstance(node, FunctionCall) and node.name == "sample":
        return False
    return all(check_deterministic(child) for child in _children(node))


_CONDITION = re.compile(r"^\s*([A-Za-z_]\w*)\s*(>=|<=|==|>|<|=)\s*(-?\d+(?:\.\d+)?)\s*$")

_COMPARISONS = {
    ">": lambda a, b: a > b,
    "<": lambda a, b: a < b,
    ">=": lambda a, b: a >= b,
    "<=": lambda a, b: a <= b,
    "==": lambda a, b: a == b,
    "=": lambda a, b: a == b,
}


def parse_condition(text: str) -> Callable:
    """
    Build a rejection-sampling predicate from text such as `height>170`.

    Results that do not bind the variable are rejected.
    """
    match = _CONDITION.match(text)
    if match is None:
        raise ValueError(f"Invalid condition format: {text}")
    name, op, number = match.groups()
    compare = _COMPARISONS[op]
    threshold = float(number)

    def condition(result) -> bool:
        if name not in result.variables:
            return False
        return compare(result.variables[name], threshold)

    return condition
