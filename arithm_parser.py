"""Concrete syntax for arithm expressions.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

This parser uses the grammar in `arithm_grammar.lark` to derive an abstract
syntax tree (see `arithm_ast`) from ordinary infix arithmetic like
`(40 - 3) + 1`. A small Lark Transformer class turns the Lark parser's own
tree nodes into arithm's tree nodes. It's the non-recursive kind of
Transformer, since a long chain like `1 + 1 + ... + 1` makes a tree as deep as
the chain is long.

The module also has `unparse`, which goes the other way. It only adds the
parentheses it needs to, so `unparse(parse(text))` is usually a tidied-up
version of `text`, and `parse(unparse(ast))` is always equal to `ast`.
"""

import functools
import os

import lark

import arithm_ast
import arithm_descent
import arithm_naturals

from typing import Sequence


def parse(text: str) -> arithm_ast.Expression:
  """Parse an arithm expression.

  Args:
    text: Expression text, e.g. '2 * (2 + 2)'.

  Returns:
    An abstract syntax tree for the expression.

  Raises:
    lark.exceptions.UnexpectedInput: `text` isn't a well-formed expression.
    lark.exceptions.VisitError: something went wrong building the tree from
        `text`; this shouldn't happen.
  """
  return _Transformer().transform(_parser().parse(text))


def unparse(ast: arithm_ast.Expression) -> str:
  """Render an abstract syntax tree as arithm expression text.

  Args:
    ast: Expression to render.

  Returns:
    Expression text that `parse` would turn back into `ast`.
  """
  return arithm_descent.fold(_unparse_node, ast)[0]


@functools.cache
def _parser() -> lark.Lark:
  """Create/retrieve a singleton Lark parser from the expression grammar."""
  module_dir = os.path.dirname(os.path.realpath(__file__))
  return lark.Lark.open(os.path.join(module_dir, 'arithm_grammar.lark'),
                        parser='lalr')


class _Transformer(lark.visitors.Transformer_NonRecursive):
  """A Lark Transformer that builds arithm syntax trees."""

  plus = lark.v_args(inline=True)(arithm_ast.Plus)

  minus = lark.v_args(inline=True)(arithm_ast.Minus)

  mult = lark.v_args(inline=True)(arithm_ast.Mult)

  @lark.v_args(inline=True)
  def const(self, natural):
    return arithm_ast.Const(arithm_naturals.from_digits(natural))


# Binding strength of each operator; bigger binds tighter. Literals never need
# parentheses, so they get the biggest number.
_PRECEDENCE_LITERAL = 3
_PRECEDENCE_PRODUCT = 2
_PRECEDENCE_SUM = 1


def _unparse_node(
    ast: arithm_ast.AstNode,
    operands: Sequence[tuple[str, int]],
) -> tuple[str, int]:
  """Render one node given its rendered operands and their precedences."""
  match ast:
    case arithm_ast.Const(value=value):
      return arithm_naturals.to_digits(value), _PRECEDENCE_LITERAL
    case arithm_ast.Plus():
      return _binary('+', _PRECEDENCE_SUM, *operands), _PRECEDENCE_SUM
    case arithm_ast.Minus():
      return _binary('-', _PRECEDENCE_SUM, *operands), _PRECEDENCE_SUM
    case arithm_ast.Mult():
      return _binary('*', _PRECEDENCE_PRODUCT, *operands), _PRECEDENCE_PRODUCT
    case _:
      raise _InternalError(f'Not an arithm expression: {ast!r}')


def _binary(symbol: str, precedence: int,
            left: tuple[str, int], right: tuple[str, int]) -> str:
  """Join two rendered operands with an operator, parenthesising as needed."""
  # Operators associate to the left, so a right operand of equal precedence
  # needs parentheses but a left one doesn't.
  left_text, left_precedence = left
  right_text, right_precedence = right
  if left_precedence < precedence: left_text = f'({left_text})'
  if right_precedence <= precedence: right_text = f'({right_text})'
  return f'{left_text} {symbol} {right_text}'


class _InternalError(RuntimeError):
  """An uninformative exception for "this shouldn't happen" errors."""
