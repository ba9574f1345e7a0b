"""Abstract syntax trees for arithm expressions.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

An arithm expression is a tree whose leaves are natural-number literals and
whose interior nodes are one of three binary operators: addition, truncating
subtraction, and multiplication. Nodes are frozen dataclasses, so a tree can be
handed to the evaluator and the code generator (or anyone else) without fear
of it changing underfoot.

There are exactly four kinds of node: `Const`, `Plus`, `Minus`, and `Mult`.
Code that takes trees apart should match on all four explicitly (`Binary` is
a convenience base class, not a node kind in its own right) and treat any
other type as an error.
"""

import dataclasses

import arithm_naturals


@dataclasses.dataclass(frozen=True)
class AstNode:
  """Base class for all syntax tree nodes."""


@dataclasses.dataclass(frozen=True)
class Expression(AstNode):
  """Base class for expressions."""


@dataclasses.dataclass(frozen=True)
class Const(Expression):
  """Leaf node for natural-number literals."""
  value: arithm_naturals.Natural

  def __post_init__(self):
    arithm_naturals.check_natural(self.value, 'Const value')


@dataclasses.dataclass(frozen=True)
class Binary(Expression):
  """Shared base class for the binary operator nodes."""
  left: Expression
  right: Expression

  def __post_init__(self):
    for name in ('left', 'right'):
      operand = getattr(self, name)
      if not isinstance(operand, Expression): raise TypeError(
          f'{type(self).__name__} {name} operand must be an Expression, '
          f'not {type(operand).__name__}')


@dataclasses.dataclass(frozen=True)
class Plus(Binary):
  """Node for addition."""


@dataclasses.dataclass(frozen=True)
class Minus(Binary):
  """Node for truncating subtraction: results below zero become zero."""


@dataclasses.dataclass(frozen=True)
class Mult(Binary):
  """Node for multiplication."""
