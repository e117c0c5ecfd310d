"""Recursive-descent parser producing pplcore ASTs.

Grammar, lowest precedence first:

    program     := statement*
    statement   := assignment | functionCall
    assignment  := IDENTIFIER '=' expression
    expression  := term (('+' | '-') term)*
    term        := factor (('*' | '/') factor)*
    factor      := NUMBER | functionCall | IDENTIFIER | '(' expression ')' | '-' factor
    functionCall:= IDENTIFIER '(' (expression (',' expression)*)? ')'
"""

from typing import List, Sequence, Union

from ..errors import ParseError
from .lexer import Token, TokenKind
from .nodes import (
    Assignment,
    BinaryExpression,
    Error,
    FunctionCall,
    NumberLiteral,
    Program,
    Variable,
)


class Parser:
    """Parser over a token list. A missing trailing EOF token is tolerated."""

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].kind is not TokenKind.EOF:
            end = self.tokens[-1].position + 1 if self.tokens else 0
            self.tokens.append(Token(TokenKind.EOF, None, end))
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def peek(self, offset: int = 1) -> Token:
        index = min(self.index + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.current
        if token.kind is not TokenKind.EOF:
            self.index += 1
        return token

    def expect(self, kind: TokenKind, context: str) -> Token:
        if self.current.kind is not kind:
            raise ParseError(
                f"Expected {kind.value} {context}, got {self._describe(self.current)}",
                self.current,
            )
        return self.advance()

    def parse_program(self) -> Program:
        """Parse every statement up to EOF. Raises ParseError."""
        statements = []
        while self.current.kind is not TokenKind.EOF:
            statements.append(self.parse_statement())
        return Program(tuple(statements))

    def parse_statement(self) -> Union[Assignment, FunctionCall]:
        token = self.current
        if token.kind is not TokenKind.IDENTIFIER:
            raise ParseError(f"Unexpected {self._describe(token)} at start of statement", token)

        following = self.peek().kind
        if following is TokenKind.EQUAL:
            return self.parse_assignment()
        if following is TokenKind.LPAREN:
            return self.parse_function_call()
        raise ParseError(
            f"Expected '=' or '(' after identifier '{token.value}', got {self._describe(self.peek())}",
            self.peek(),
        )

    def parse_assignment(self) -> Assignment:
        name = self.expect(TokenKind.IDENTIFIER, "as assignment target").value
        self.expect(TokenKind.EQUAL, f"after '{name}'")
        return Assignment(name, self.parse_expression())

    def parse_expression(self):
        node = self.parse_term()
        while self.current.kind in (TokenKind.PLUS, TokenKind.MINUS):
            op = self.advance().value
            node = BinaryExpression(op, node, self.parse_term())
        return node

    def parse_term(self):
        node = self.parse_factor()
        while self.current.kind in (TokenKind.STAR, TokenKind.SLASH):
            op = self.advance().value
            node = BinaryExpression(op, node, self.parse_factor())
        return node

    def parse_factor(self):
        token = self.current
        if token.kind is TokenKind.NUMBER:
            self.advance()
            return NumberLiteral(token.value)
        if token.kind is TokenKind.IDENTIFIER:
            if self.peek().kind is TokenKind.LPAREN:
                return self.parse_function_call()
            self.advance()
            return Variable(token.value)
        if token.kind is TokenKind.LPAREN:
            self.advance()
            node = self.parse_expression()
            self.expect(TokenKind.RPAREN, "to close '('")
            return node
        if token.kind is TokenKind.MINUS:
            # -x is sugar for 0 - x
            self.advance()
            return BinaryExpression("-", NumberLiteral(0.0), self.parse_factor())
        raise ParseError(f"Unexpected {self._describe(token)} in expression", token)

    def parse_function_call(self) -> FunctionCall:
        name = self.expect(TokenKind.IDENTIFIER, "as function name").value
        self.expect(TokenKind.LPAREN, f"after '{name}'")
        args = []
        if self.current.kind is not TokenKind.RPAREN:
            args.append(self.parse_expression())
            while self.current.kind is TokenKind.COMMA:
                self.advance()
                args.append(self.parse_expression())
        self.expect(TokenKind.RPAREN, f"to close call to '{name}'")
        return FunctionCall(name, tuple(args))

    @staticmethod
    def _describe(token: Token) -> str:
        if token.kind is TokenKind.EOF:
            return "end of input"
        return f"{token.kind.value} {token.value!r}"


def parse(tokens: Sequence[Token]) -> Union[Program, Error]:
    """
    Parse a token list into a Program.

    Malformed input is returned as an `Error` node rather than raised, so
    callers must check `ast.is_error` before interpreting.
    """
    parser = Parser(tokens)
    try:
        return parser.parse_program()
    except ParseError as e:
        position = e.token.position if e.token is not None else -1
        return Error(e.message, position)
    except RecursionError:
        return Error("Expression nested too deeply", parser.current.position)
