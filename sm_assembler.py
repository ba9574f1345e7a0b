"""Assembly language for the arithm stack machine.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

Stack machine "assembly" is about as simple as assembly gets: one instruction
per line, written as a mnemonic followed by any operands. There are four
mnemonics, which are not case-sensitive:

   PUSH n    Push the natural number n
   ADD       Pop two entries, push their sum
   SUB       Pop two entries, push their truncated difference
   MUL       Pop two entries, push their product

A `;` starts a comment that runs to the end of the line. Blank lines (or lines
with only a comment) are ignored. So, if | marks the beginning of a line, this
"assembly code":

   |; The answer.
   |    push 21
   |    PUSH 21   ; Again
   |
   |    Add

assembles to `(Push(21), Push(21), Add())`, which leaves 42 on the stack. The
`disassemble` function goes the other way, producing one upper-case
instruction per line with no comments.
"""

import re

import arithm_naturals
import sm_instructions

from typing import Sequence


# Nullary instructions, by mnemonic.
_NULLARY = {
    'ADD': sm_instructions.Add,
    'SUB': sm_instructions.Sub,
    'MUL': sm_instructions.Mul,
}


def assemble(source: Sequence[str]) -> sm_instructions.Program:
  """Convert stack machine assembly code into a program.

  See module docstring for documentation on the assembly format.

  Args:
    source: A list of lines of assembly program text.

  Returns:
    The program described by `source`.

  Raises:
    ValueError: `source` contains an unknown mnemonic, or an instruction with
        the wrong number or kind of operands. Line numbers in the error
        message count from 1.
  """
  line_regex = re.compile(
      r"""\s*
          (?P<mnemonic>[^\s;]+)?  # The mnemonic, if the line isn't blank.
          (?P<operands>[^;]*?)   # Anything else before any comment.
          \s*
          (?:;.*)?             # A comment, which we ignore.""",
      re.VERBOSE)
  natural_regex = re.compile(r'\d+', re.ASCII)

  program: list[sm_instructions.Instruction] = []
  for num, line in enumerate(source, start=1):
    matched = line_regex.fullmatch(line)  # Always matches.
    assert matched is not None            # So this is for mypy.
    mnemonic, operands = matched['mnemonic'], matched['operands'].split()
    if mnemonic is None: continue
    mnemonic = mnemonic.upper()

    if mnemonic == 'PUSH':
      if len(operands) != 1 or not natural_regex.fullmatch(operands[0]):
        raise ValueError(
            f'PUSH needs one natural number operand on line {num}: "{line}"')
      program.append(sm_instructions.Push(
          arithm_naturals.from_digits(operands[0])))
    elif mnemonic in _NULLARY:
      if operands: raise ValueError(
          f'{mnemonic} takes no operands on line {num}: "{line}"')
      program.append(_NULLARY[mnemonic]())
    else:
      raise ValueError(f'Unknown mnemonic on line {num}: "{line}"')

  return tuple(program)


def disassemble(program: Sequence[sm_instructions.Instruction]) -> list[str]:
  """Convert a program into stack machine assembly code.

  Args:
    program: Program to convert.

  Returns:
    One line of assembly code per instruction in `program`.
  """
  lines: list[str] = []
  for instruction in program:
    match instruction:
      case sm_instructions.Push(value=value):
        lines.append(f'PUSH {arithm_naturals.to_digits(value)}')
      case sm_instructions.Add():
        lines.append('ADD')
      case sm_instructions.Sub():
        lines.append('SUB')
      case sm_instructions.Mul():
        lines.append('MUL')
      case _:
        raise ValueError(f'Not a stack machine instruction: {instruction!r}')
  return lines
