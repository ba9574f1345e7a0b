"""Helpers shared by the arithm tests.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.
"""

import random

import arithm_ast

from arithm_ast import Const, Minus, Mult, Plus


def random_expression(
    rng: random.Random,
    depth: int,
    *,
    leaf_chance: float = 0.3,
    largest: int = 9,
    big_chance: float = 0.0,
) -> arithm_ast.Expression:
  """Make a random expression no deeper than `depth`.

  Args:
    rng: Source of randomness; seed it for repeatable tests.
    depth: Maximum depth of the expression tree. A depth of 0 means a literal.
    leaf_chance: Chance that any node above the maximum depth is a literal
        anyway.
    largest: Literals are usually no bigger than this. Keeping them small
        means subtractions truncate fairly often.
    big_chance: Chance that a literal is instead drawn from the naturals below
        10**12.

  Returns:
    The random expression.
  """
  if depth <= 0 or rng.random() < leaf_chance:
    if rng.random() < big_chance: return Const(rng.randrange(10**12))
    return Const(rng.randrange(largest + 1))
  node_type = rng.choice([Plus, Minus, Mult])
  kwargs = dict(leaf_chance=leaf_chance, largest=largest,
                big_chance=big_chance)
  return node_type(random_expression(rng, depth - 1, **kwargs),
                   random_expression(rng, depth - 1, **kwargs))
