import io
import unittest

from rox.lang.error import RoxRuntimeError, RoxTypeError, UndefinedVariable, UninitializedVariable
from rox.lang.parser import parse
from rox.runtime.interpreter import Interpreter
from rox.runtime.value import Num


def run(source, interpreter=None):
    """Returns (printed output, runtime errors) of source, which must parse cleanly."""
    statements, errors = parse(source)
    assert not errors, [str(error) for error in errors]

    if interpreter is None:
        interpreter = Interpreter(io.StringIO())
    runtime_errors = interpreter.interpret(statements)
    return interpreter.stdout.getvalue(), runtime_errors


class PrintTestCase(unittest.TestCase):

    def test_expressions(self):
        cases = {
            "print 1 + 2;": "3",
            "print 10 / 4;": "2.5",
            "print 10 / 2 * 5;": "25",
            "print 10 / (2 * 5);": "1",
            "print -10 + 2;": "-8",
            "print -(2 * 3);": "-6",
            "print --4;": "4",
            "print \"a\" + \"b\";": "ab",
            "print \"a\" == \"a\";": "true",
            "print \"a\" == 1;": "false",
            "print \"a\" != 1;": "true",
            "print nil;": "nil",
            "print nil == nil;": "true",
            "print !true;": "false",
            "print 1 < 2 == true;": "true",
            "print \"abc\" < \"abd\";": "true",
            "print 1 / 0;": "inf",
            "print -1 / 0;": "-inf",
            "print 0 / 0;": "NaN",
            "print 0.1 + 0.2;": "0.30000000000000004",
        }
        for case, expected in cases.items():
            output, errors = run(case)
            self.assertEqual([], errors, case)
            self.assertEqual(expected + "\n", output, case)

    def test_statements_in_order(self):
        output, errors = run("print 1; print 2; print 3;")
        self.assertEqual("1\n2\n3\n", output)
        self.assertEqual([], errors)


class VariableTestCase(unittest.TestCase):

    def test_assignment(self):
        cases = {
            "let a; let b; a = b = 3; print a; print b;": "3\n3\n",
            "let a; print a = 3;": "3\n",
            "let a = 1; a = a + 1; print a;": "2\n",
            "let a = nil; print a;": "nil\n",
        }
        for case, expected in cases.items():
            output, errors = run(case)
            self.assertEqual([], errors, case)
            self.assertEqual(expected, output, case)

    def test_chained_assignment_value(self):
        interpreter = Interpreter(io.StringIO())
        run("let a; let b;", interpreter)
        statements, __ = parse("a = b = 3;")
        self.assertEqual(Num(3.0), interpreter.evaluate(statements[0].expression))
        self.assertEqual(Num(3.0), interpreter.environment.get("a"))
        self.assertEqual(Num(3.0), interpreter.environment.get("b"))

    def test_scoping(self):
        cases = {
            "let x = 1; { let x = 2; print x; } print x;": "2\n1\n",
            "let x = 1; let x = 2; print x;": "2\n",
            "let x = 1; { x = 2; } print x;": "2\n",
            "let x = 1; { let y = x + 1; { print x + y; } }": "3\n",
            "{ let x = 1; { let x = x + 1; print x; } print x; }": "2\n1\n",
        }
        for case, expected in cases.items():
            output, errors = run(case)
            self.assertEqual([], errors, case)
            self.assertEqual(expected, output, case)

    def test_block_variable_invisible_after_block(self):
        output, errors = run("{ let y = 1; } print y;")
        self.assertEqual("", output)
        self.assertEqual([UndefinedVariable], [type(error) for error in errors])
        self.assertEqual("Undefined variable 'y'.", errors[0].msg)

    def test_uninitialized(self):
        output, errors = run("let x; print x;")
        self.assertEqual([UninitializedVariable], [type(error) for error in errors])

        output, errors = run("y = 1;")
        self.assertEqual([UndefinedVariable], [type(error) for error in errors])


class ControlFlowTestCase(unittest.TestCase):

    def test_if(self):
        cases = {
            "if (1 < 2) print \"yes\"; else print \"no\";": "yes\n",
            "if (1 > 2) print \"yes\"; else print \"no\";": "no\n",
            "if (false) print 1;": "",
            "if (true) { let a = 1; print a; }": "1\n",
            "if (false) if (true) print 1; else print 2;": "",
            "let a = 1; if (a == 1) a = 2; print a;": "2\n",
        }
        for case, expected in cases.items():
            output, errors = run(case)
            self.assertEqual([], errors, case)
            self.assertEqual(expected, output, case)

        should_raise = ["if (nil) print 1;", "if (1) print 1;", "if (\"true\") print 1;"]
        for case in should_raise:
            output, errors = run(case)
            self.assertEqual("", output, case)
            self.assertEqual([RoxTypeError], [type(error) for error in errors], case)

    def test_else_if_chain(self):
        chain = "".join("if (a == {}) print \"arm {}\"; else ".format(i, i) for i in range(200)) + "print \"none\";"
        cases = {
            "let a = 0; ": "arm 0\n",
            "let a = 150; ": "arm 150\n",
            "let a = -1; ": "none\n",
        }
        for case, expected in cases.items():
            output, errors = run(case + chain)
            self.assertEqual([], errors, case)
            self.assertEqual(expected, output, case)

    def test_logical(self):
        cases = {
            "print false and undefined_var;": "false\n",
            "print true or undefined_var;": "true\n",
            "print true and false;": "false\n",
            "print false or true;": "true\n",
            "print true and 1;": "1\n",
            "print false or \"s\";": "s\n",
            "let a = 0; print false and (a = 1); print a;": "false\n0\n",
        }
        for case, expected in cases.items():
            output, errors = run(case)
            self.assertEqual([], errors, case)
            self.assertEqual(expected, output, case)

        should_raise = ["print 1 and true;", "print nil or true;"]
        for case in should_raise:
            output, errors = run(case)
            self.assertEqual([RoxTypeError], [type(error) for error in errors], case)


class ErrorIsolationTestCase(unittest.TestCase):

    def test_type_error_isolated(self):
        output, errors = run("print \"true\" + 1; print 2;")
        self.assertEqual("2\n", output)
        self.assertEqual([RoxTypeError], [type(error) for error in errors])

    def test_errors_in_order(self):
        output, errors = run("print x; print 1; print -\"s\"; print !1; print 2;")
        self.assertEqual("1\n2\n", output)
        self.assertEqual([UndefinedVariable, RoxTypeError, RoxTypeError], [type(error) for error in errors])

    def test_scope_closed_on_error(self):
        interpreter = Interpreter(io.StringIO())
        output, errors = run("{ let z = 1; print z + true; }", interpreter)
        self.assertEqual([RoxTypeError], [type(error) for error in errors])
        self.assertEqual(1, interpreter.environment.depth)

        output, errors = run("print z;", interpreter)
        self.assertEqual([UndefinedVariable], [type(error) for error in errors])

    def test_reporter(self):
        reported = []
        statements, __ = parse("print a; print 1; print b;")
        interpreter = Interpreter(io.StringIO())
        errors = interpreter.interpret(statements, reporter=reported.append)
        self.assertEqual(errors, reported)
        self.assertEqual(2, len(reported))

    def test_recursion(self):
        # left-folded chains are parsed iteratively, but evaluated recursively
        output, errors = run("print " + "1 + " * 5000 + "1; print 2;")
        self.assertEqual("2\n", output)
        self.assertEqual(["maximum recursion depth exceeded"], [error.msg for error in errors])
        self.assertIsInstance(errors[0], RoxRuntimeError)


if __name__ == '__main__':
    unittest.main()
