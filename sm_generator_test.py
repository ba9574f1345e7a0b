"""Tests for the sm_generator module.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

Besides checking the code that comes out of the code generator, this module
checks that the code does the right thing: running the compiled code for an
expression must leave exactly the value that the evaluator computes for it.
We check that on lots of randomly generated expressions, as well as on some
hand-picked ones.
"""

import random
import unittest

import arithm_ast
import arithm_evaluator
import arithm_testing
import sm_generator
import sm_instructions
import sm_interpreter

from arithm_ast import Const, Minus, Mult, Plus
from sm_instructions import Add, Mul, Push, Sub


class SmGeneratorTest(unittest.TestCase):
  """Test harness for testing the sm_generator module."""

  def test_const(self):
    """A literal compiles to a single push."""
    self.assertEqual(sm_generator.expression(Const(0)), (Push(0),))
    self.assertEqual(sm_generator.expression(Const(7)), (Push(7),))

  def test_operators(self):
    """Operands first, left one first, then the operator."""
    self.assertEqual(sm_generator.expression(Plus(Const(1), Const(2))),
                     (Push(1), Push(2), Add()))
    self.assertEqual(sm_generator.expression(Minus(Const(1), Const(2))),
                     (Push(1), Push(2), Sub()))
    self.assertEqual(sm_generator.expression(Mult(Const(1), Const(2))),
                     (Push(1), Push(2), Mul()))

  def test_nested(self):
    """Nested expressions compile to a post-order walk of the tree."""
    ast = Plus(Minus(Const(40), Const(3)), Mult(Const(2), Const(7)))
    self.assertEqual(sm_generator.expression(ast), (
        Push(40), Push(3), Sub(), Push(2), Push(7), Mul(), Add()))

  def test_concatenation_rules(self):
    """Code for an operator node splices together its operands' code."""
    rng = random.Random(99)
    for _ in range(100):
      a = arithm_testing.random_expression(
          rng, 5, leaf_chance=0.25, largest=11, big_chance=0.05)
      b = arithm_testing.random_expression(
          rng, 5, leaf_chance=0.25, largest=11, big_chance=0.05)
      for node_type, instruction in ((Plus, Add()), (Minus, Sub()),
                                     (Mult, Mul())):
        with self.subTest(node_type=node_type.__name__, a=a, b=b):
          self.assertEqual(
              sm_generator.expression(node_type(a, b)),
              sm_instructions.concatenate(sm_generator.expression(a),
                                          sm_generator.expression(b),
                                          [instruction]))

  def test_scenarios(self):
    """Worked examples run on the stack machine."""
    def run(ast: arithm_ast.Expression) -> list[int]:
      return sm_interpreter.run(sm_generator.expression(ast), [])

    self.assertEqual(run(Const(0)), [0])
    self.assertEqual(run(Minus(Const(0), Const(4))), [0])
    self.assertEqual(run(Minus(Minus(Const(40), Const(3)), Const(1))), [36])
    self.assertEqual(run(Minus(Const(40), Minus(Const(3), Const(1)))), [38])
    self.assertEqual(run(Plus(Const(2), Mult(Const(2), Const(2)))), [6])
    self.assertEqual(run(Mult(Plus(Const(2), Const(2)), Const(2))), [8])
    self.assertEqual(run(Plus(Minus(Const(40), Const(3)), Const(1))), [38])
    self.assertEqual(run(Plus(Minus(Const(44), Const(3)), Const(1))), [42])

  def test_compiled_code_matches_evaluator(self):
    """Compiled code computes what the evaluator computes, and nothing else."""
    rng = random.Random(2026)
    for _ in range(500):
      ast = arithm_testing.random_expression(
          rng, 8, leaf_chance=0.25, largest=11, big_chance=0.05)
      with self.subTest(ast=ast):
        self.assertEqual(
            sm_interpreter.run(sm_generator.expression(ast), [], strict=True),
            [arithm_evaluator.evaluate(ast)])

  def test_compiled_code_is_context_independent(self):
    """Compiled code only adds one value to whatever stack it's run on."""
    rng = random.Random(31337)
    for _ in range(200):
      a = arithm_testing.random_expression(
          rng, 5, leaf_chance=0.25, largest=11, big_chance=0.05)
      b = arithm_testing.random_expression(
          rng, 5, leaf_chance=0.25, largest=11, big_chance=0.05)
      stack = [rng.randrange(100) for _ in range(rng.randrange(4))]
      for node_type, instruction in ((Plus, Add()), (Minus, Sub()),
                                     (Mult, Mul())):
        ast = node_type(a, b)
        with self.subTest(ast=ast, stack=stack):
          whole = sm_interpreter.run(sm_generator.expression(ast), stack)
          in_pieces = sm_interpreter.run(
              [instruction],
              sm_interpreter.run(
                  sm_generator.expression(b),
                  sm_interpreter.run(sm_generator.expression(a), stack)))
          self.assertEqual(whole, in_pieces)
          self.assertEqual(whole, stack + [arithm_evaluator.evaluate(ast)])

  def test_deep(self):
    """Very deep trees compile (and run) without hitting the recursion limit."""
    ast: arithm_ast.Expression = Const(1)
    for i in range(25000):
      ast = Mult(ast, Const(1)) if i % 3 else Plus(Const(1), ast)
    program = sm_generator.expression(ast)
    self.assertEqual(len(program), 50001)
    self.assertEqual(sm_interpreter.run(program, []),
                     [arithm_evaluator.evaluate(ast)])

  def test_not_an_expression(self):
    """Foreign tree nodes are an error, not something to skip over."""
    with self.assertRaisesRegex(RuntimeError, 'Not an arithm expression'):
      sm_generator.expression(arithm_ast.Expression())
