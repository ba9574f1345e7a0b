"""Big-step evaluation of arithm expressions.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

The evaluator computes the value of an expression straight from its syntax
tree. It's the yardstick for the rest of the toolchain: whatever the stack
machine computes for a compiled expression ought to be what `evaluate` says.
"""

import arithm_ast
import arithm_descent
import arithm_naturals

from typing import Sequence


def evaluate(expression: arithm_ast.Expression) -> arithm_naturals.Natural:
  """Compute the natural-number value of an expression.

  Subtraction truncates: if the right operand of a `Minus` is at least as big
  as the left operand, the result is 0.

  Args:
    expression: Expression to evaluate.

  Returns:
    The value of `expression`.
  """
  return arithm_descent.fold(_evaluate_node, expression)


def _evaluate_node(
    ast: arithm_ast.AstNode,
    operands: Sequence[arithm_naturals.Natural],
) -> arithm_naturals.Natural:
  """Evaluate one node given the values of its operands."""
  match ast:
    case arithm_ast.Const(value=value):
      return value
    case arithm_ast.Plus():
      left, right = operands
      return left + right
    case arithm_ast.Minus():
      left, right = operands
      return arithm_naturals.monus(left, right)
    case arithm_ast.Mult():
      left, right = operands
      return left * right
    case _:
      raise _InternalError(f'Not an arithm expression: {ast!r}')


class _InternalError(RuntimeError):
  """An uninformative exception for "this shouldn't happen" errors."""
