import unittest

from pplcore import (
    ExecutionResult, LexError, ParseError, Program,
    check_deterministic, compile_program, parse_condition, pretty, summarize,
)


class TestCompileProgram(unittest.TestCase):

    def test_returns_program(self):
        self.assertIsInstance(compile_program("x = 1"), Program)

    def test_parse_error_is_raised(self):
        self.assertRaises(ParseError, compile_program, "x = (1")

    def test_lex_error_is_raised(self):
        self.assertRaises(LexError, compile_program, "x = 1 ; y = 2")


class TestPretty(unittest.TestCase):

    def test_tree(self):
        expected = "\n".join([
            "Program",
            "└─ Assignment(x)",
            "   └─ FunctionCall(sample)",
            "      └─ FunctionCall(normal)",
            "         ├─ NumberLiteral(0)",
            "         └─ NumberLiteral(1)",
        ])
        self.assertEqual(pretty(compile_program("x = sample(normal(0, 1))")), expected)

    def test_siblings(self):
        expected = "\n".join([
            "Program",
            "├─ Assignment(a)",
            "│  └─ NumberLiteral(1)",
            "└─ Assignment(b)",
            "   └─ BinaryExpression(+)",
            "      ├─ Variable(a)",
            "      └─ NumberLiteral(2.5)",
        ])
        self.assertEqual(pretty(compile_program("a = 1\nb = a + 2.5")), expected)


class TestSummarize(unittest.TestCase):

    def test_counts(self):
        counts = summarize(compile_program("x = sample(normal(0, 1))\nobserve(x + 1, normal(0, 1))"))
        self.assertEqual(counts, {
            "Program": 1,
            "Assignment": 1,
            "FunctionCall": 4,
            "NumberLiteral": 5,
            "BinaryExpression": 1,
            "Variable": 1,
        })


class TestCheckDeterministic(unittest.TestCase):

    def test_deterministic(self):
        self.assertTrue(check_deterministic(compile_program("x = 1 + 2\ny = exp(x)")))
        self.assertTrue(check_deterministic(compile_program("observe(1, normal(0, 1))")))

    def test_non_deterministic(self):
        self.assertFalse(check_deterministic(compile_program("x = 1\ny = x * sample(uniform(0, 1))")))


class TestParseCondition(unittest.TestCase):

    def result(self, **variables):
        return ExecutionResult(variables={k: float(v) for k, v in variables.items()})

    def test_operators(self):
        cases = {
            "height>170": (171, 170),
            "height<170": (169, 170),
            "height>=170": (170, 169),
            "height<=170": (170, 171),
            "height==170": (170, 171),
            "height=170": (170, 171),
            "height > -1.5": (0, -2),
        }
        for text, (accepted, rejected) in cases.items():
            condition = parse_condition(text)
            self.assertTrue(condition(self.result(height=accepted)), text)
            self.assertFalse(condition(self.result(height=rejected)), text)

    def test_missing_variable_rejected(self):
        self.assertFalse(parse_condition("x>0")(self.result(y=1)))

    def test_invalid_format(self):
        for text in ("height", "height>>1", "170>height", "height>abc"):
            self.assertRaises(ValueError, parse_condition, text)


if __name__ == '__main__':
    unittest.main()
