import unittest

from pplcore import LexError, Lexer, Token, TokenKind, tokenize


class TestLexer(unittest.TestCase):
    """Tokenizing source text."""

    def test_simple_assignment(self):
        tokens = tokenize("x = 5")
        self.assertEqual(
            tokens[:-1],
            [
                Token(TokenKind.IDENTIFIER, "x"),
                Token(TokenKind.EQUAL, "="),
                Token(TokenKind.NUMBER, 5.0),
            ],
        )
        self.assertEqual(tokens[-1].kind, TokenKind.EOF)

    def test_operators_and_punctuation(self):
        kinds = [t.kind for t in tokenize("+ - * / = ( ) ,")]
        self.assertEqual(
            kinds,
            [
                TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH,
                TokenKind.EQUAL, TokenKind.LPAREN, TokenKind.RPAREN, TokenKind.COMMA,
                TokenKind.EOF,
            ],
        )

    def test_numbers(self):
        values = [t.value for t in tokenize("42 3.25 .5 007")[:-1]]
        self.assertEqual(values, [42.0, 3.25, 0.5, 7.0])

    def test_identifiers(self):
        values = [t.value for t in tokenize("mu sigma_2 tmp_ x1")[:-1]]
        self.assertEqual(values, ["mu", "sigma_2", "tmp_", "x1"])

    def test_sample_and_observe_are_identifiers(self):
        tokens = tokenize("sample observe")
        self.assertEqual(tokens[0], Token(TokenKind.IDENTIFIER, "sample"))
        self.assertEqual(tokens[1], Token(TokenKind.IDENTIFIER, "observe"))

    def test_comments_and_whitespace_skipped(self):
        source = "# prior\nx = 1  # inline comment\n\n\ty = 2\n# trailing"
        values = [t.value for t in tokenize(source)[:-1]]
        self.assertEqual(values, ["x", "=", 1.0, "y", "=", 2.0])

    def test_empty_source(self):
        tokens = tokenize("   # nothing here")
        self.assertEqual(len(tokens), 1)
        self.assertEqual(tokens[0].kind, TokenKind.EOF)

    def test_positions(self):
        tokens = tokenize("ab = 12")
        self.assertEqual([t.position for t in tokens], [0, 3, 5, 7])

    def test_unexpected_character(self):
        with self.assertRaises(LexError) as ctx:
            tokenize("x = 1\ny = 2 $ 3")
        error = ctx.exception
        self.assertEqual(error.char, "$")
        self.assertEqual(error.position, 12)
        self.assertEqual(error.line, 2)
        self.assertEqual(error.column, 7)

    def test_identifier_must_start_with_letter(self):
        with self.assertRaises(LexError) as ctx:
            tokenize("_tmp = 1")
        self.assertEqual(ctx.exception.char, "_")
        self.assertEqual(ctx.exception.position, 0)

    def test_trailing_dot_is_an_error(self):
        with self.assertRaises(LexError) as ctx:
            tokenize("x = 3.")
        self.assertEqual(ctx.exception.char, ".")

    def test_restartable(self):
        lexer = Lexer("x = normal(0, 1)")
        first = lexer.tokenize()
        second = lexer.tokenize()
        self.assertEqual(first, second)

    def test_failure_does_not_corrupt_earlier_tokens(self):
        lexer = Lexer("x = 1 @")
        emitted = [lexer.next_token() for _ in range(3)]
        with self.assertRaises(LexError):
            lexer.next_token()
        self.assertEqual([t.value for t in emitted], ["x", "=", 1.0])


if __name__ == '__main__':
    unittest.main()
