"""Instructions and programs for the arithm stack machine.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

The stack machine knows four instructions. `Push` places a natural number on
top of the stack; `Add`, `Sub`, and `Mul` pop the top two entries and push
the result of combining them. A program is a tuple of instructions, run from
first to last. See `sm_interpreter` for what the instructions actually do and
`sm_assembler` for their text form.
"""

import dataclasses

import arithm_naturals

from typing import Sequence


@dataclasses.dataclass(frozen=True)
class Instruction:
  """Base class for stack machine instructions."""


@dataclasses.dataclass(frozen=True)
class Push(Instruction):
  """Push a natural number onto the stack."""
  value: arithm_naturals.Natural

  def __post_init__(self):
    arithm_naturals.check_natural(self.value, 'Push operand')


@dataclasses.dataclass(frozen=True)
class Add(Instruction):
  """Pop two entries, push their sum."""


@dataclasses.dataclass(frozen=True)
class Sub(Instruction):
  """Pop two entries, push their truncated difference (deeper minus top)."""


@dataclasses.dataclass(frozen=True)
class Mul(Instruction):
  """Pop two entries, push their product."""


# The nullary instructions that combine the top two stack entries.
ARITHMETIC = (Add, Sub, Mul)


Program = tuple[Instruction, ...]


def concatenate(*programs: Sequence[Instruction]) -> Program:
  """Splice programs together, one after the other."""
  return tuple(i for program in programs for i in program)
