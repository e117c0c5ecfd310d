# Language front end: tokens, AST nodes, parser
from .lexer import Lexer, Token, TokenKind, tokenize
from .nodes import (
    Node, Program, Assignment, BinaryExpression,
    NumberLiteral, Variable, FunctionCall, Error,
)
from .parser import Parser, parse

__all__ = [
    "Lexer", "Token", "TokenKind", "tokenize",
    "Node", "Program", "Assignment", "BinaryExpression",
    "NumberLiteral", "Variable", "FunctionCall", "Error",
    "Parser", "parse",
]
