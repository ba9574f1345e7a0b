#!/usr/bin/python3
"""An interpreter for the arithm stack machine.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

The machine's only state is a stack of natural numbers. Stacks are Python
lists, and the *last* item in the list is the top of the stack. The
interpreter works through a program one instruction at a time:

   Instruction   Stack before        Stack after
   -----------   ------------        -----------
   Push(n)       [...]               [..., n]
   Add           [..., a2, a1]       [..., a2 + a1]
   Sub           [..., a2, a1]       [..., a2 - a1, or 0 if that's negative]
   Mul           [..., a2, a1]       [..., a2 * a1]

Note the operand order: `a1` is the top of the stack, but it's the *right*
operand. Code that pushes x and then y and then runs Sub computes x - y.

If an arithmetic instruction finds fewer than two entries on the stack, or if
the program contains something that isn't an instruction at all, the machine
is "stuck": it stops where it is and the stack is returned as-is. Programs
made by the code generator never get stuck, so this is usually the right
thing to do; callers running programs from elsewhere can ask for a
`MachineFault` exception instead by passing `strict=True`.

This module can also be run as a program. Run it with the -h flag for
details.
"""

import argparse
import dataclasses
import sys
import warnings

import arithm_naturals
import sm_instructions

from typing import Iterator, Optional, Sequence, TextIO


__version__ = 'arithm stack machine interpreter 0.1 circa October 2026'


def _define_flags():
  """Defines an `ArgumentParser` for command-line flags used by this program."""
  flags = argparse.ArgumentParser(
      description=(__version__),
      formatter_class=argparse.ArgumentDefaultsHelpFormatter)

  flags.add_argument('source', nargs='?', default='-',
                     help=('Stack machine assembly code to run (see the '
                           'sm_assembler module); omit to read code from '
                           'standard input'),
                     type=argparse.FileType('r'))

  flags.add_argument('-s', '--stack', nargs='*', default=[],
                     help=('Initial stack contents, bottom of the stack '
                           'first'),
                     metavar='N', type=arithm_naturals.from_digits)

  flags.add_argument('--strict',
                     default=False, action=argparse.BooleanOptionalAction,
                     help=('Raise an error instead of halting quietly when '
                           'the machine gets stuck'))

  flags.add_argument('--trace',
                     default=False, action=argparse.BooleanOptionalAction,
                     help='Print every step the machine takes')

  flags.add_argument('-v', '--version',
                     default=False, action=argparse.BooleanOptionalAction,
                     help='Print version, then exit')

  return flags


Stack = list[arithm_naturals.Natural]


class MachineFault(RuntimeError):
  """Base class for errors raised when a strict machine gets stuck.

  Attributes:
    position: Index into the program of the instruction that got stuck.
    instruction: The instruction that got stuck.
    stack: The stack at the time, top of stack last.
  """

  def __init__(self, position: int, instruction: object, stack: Sequence[int]):
    self.position = position
    self.instruction = instruction
    self.stack = list(stack)
    super().__init__(
        f'{self._what} at instruction {position} ({instruction!r}) with stack '
        f'{_show_stack(self.stack)}')

  _what = 'Machine fault'


class StackUnderflowError(MachineFault):
  """An arithmetic instruction found fewer than two stack entries."""
  _what = 'Stack underflow'


class IllegalInstructionError(MachineFault):
  """The program contained something that isn't an instruction."""
  _what = 'Illegal instruction'


class MachineHaltedWarning(UserWarning):
  """A program finished in an unexpected state; see `main`."""


@dataclasses.dataclass(frozen=True)
class Snapshot:
  """The machine's state just after executing an instruction.

  Attributes:
    position: Index into the program of the instruction just executed.
    instruction: The instruction just executed.
    stack: The stack after executing it, top of stack last.
  """
  position: int
  instruction: sm_instructions.Instruction
  stack: tuple[arithm_naturals.Natural, ...]


def step(instruction: sm_instructions.Instruction, stack: Stack) -> bool:
  """Execute a single instruction.

  Args:
    instruction: Instruction to execute.
    stack: Stack to execute it on, top of stack last. Modified in place.

  Returns:
    True if the instruction was executed; False if the machine is stuck, in
    which case `stack` is left unchanged.
  """
  match instruction:
    case sm_instructions.Push(value=value):
      stack.append(value)
      return True
    case sm_instructions.Add() | sm_instructions.Sub() | sm_instructions.Mul():
      if len(stack) < 2: return False
      a1 = stack.pop()
      a2 = stack.pop()
      stack.append(_arithmetic(instruction, a2, a1))
      return True
    case _:
      return False


def run(
    program: Sequence[sm_instructions.Instruction],
    stack: Sequence[arithm_naturals.Natural] = (),
    *,
    strict: bool = False,
) -> Stack:
  """Run a program on the stack machine.

  Args:
    program: Instructions to execute, in order.
    stack: Initial stack contents, top of stack last. Not modified.
    strict: If set, raise a `MachineFault` if the machine gets stuck instead
        of halting and returning the stack.

  Returns:
    The final stack contents, top of stack last.

  Raises:
    StackUnderflowError: `strict` is set and an arithmetic instruction found
        fewer than two items on the stack.
    IllegalInstructionError: `strict` is set and `program` contains an item
        that isn't an `Instruction`.
  """
  state = list(stack)
  for position, instruction in enumerate(program):
    if not step(instruction, state):
      if strict: raise _fault(position, instruction, state)
      break
  return state


def trace(
    program: Sequence[sm_instructions.Instruction],
    stack: Sequence[arithm_naturals.Natural] = (),
) -> Iterator[Snapshot]:
  """Run a program, yielding the machine's state after every instruction.

  Stops early (and quietly) if the machine gets stuck: in that case, fewer
  snapshots come out than there are instructions in `program`.

  Args:
    program: Instructions to execute, in order.
    stack: Initial stack contents, top of stack last. Not modified.

  Yields:
    One `Snapshot` per instruction executed.
  """
  state = list(stack)
  for position, instruction in enumerate(program):
    if not step(instruction, state): return
    yield Snapshot(position, instruction, tuple(state))


def _arithmetic(
    instruction: sm_instructions.Instruction,
    left: arithm_naturals.Natural,
    right: arithm_naturals.Natural,
) -> arithm_naturals.Natural:
  """Combine two operands according to an arithmetic instruction."""
  match instruction:
    case sm_instructions.Add():
      return left + right
    case sm_instructions.Sub():
      return arithm_naturals.monus(left, right)
    case sm_instructions.Mul():
      return left * right
    case _:
      raise _InternalError(f'Not an arithmetic instruction: {instruction!r}')


def _fault(position: int, instruction: object, stack: Stack) -> MachineFault:
  """Build the exception that describes why the machine got stuck."""
  if isinstance(instruction, sm_instructions.ARITHMETIC):
    return StackUnderflowError(position, instruction, stack)
  else:
    return IllegalInstructionError(position, instruction, stack)


def _show_stack(stack: Sequence[int]) -> str:
  """Render a stack like a list, but with no limit on how long numbers are."""
  def show(value) -> str:
    try:
      return arithm_naturals.to_digits(value)
    except (TypeError, ValueError):  # Not a natural, so no long digit string.
      return repr(value)
  return '[' + ', '.join(show(v) for v in stack) + ']'


class _InternalError(RuntimeError):
  """An uninformative exception for "this shouldn't happen" errors."""


######################
#### MAIN PROGRAM ####
######################


def main(FLAGS: argparse.Namespace, stdout: Optional[TextIO] = None):
  """For when the interpreter is run as a standalone executable."""
  import sm_assembler  # Only the main program needs the assembler.
  stdout = stdout or sys.stdout

  if FLAGS.version:
    print(__version__, file=stdout)
    return

  program = sm_assembler.assemble(FLAGS.source.read().splitlines())
  for value in FLAGS.stack:
    arithm_naturals.check_natural(value, 'Initial stack entry')

  # Run the program, printing each step along the way if asked.
  steps = 0
  final_stack = list(FLAGS.stack)
  for snapshot in trace(program, FLAGS.stack):
    steps += 1
    final_stack = list(snapshot.stack)
    if FLAGS.trace:
      listing = sm_assembler.disassemble([snapshot.instruction])[0]
      print(f'{snapshot.position:>6}  {listing:<24}'
            f'{_show_stack(final_stack)}', file=stdout)

  # Complain if things didn't end the way compiled programs end.
  if steps < len(program):
    if FLAGS.strict: raise _fault(steps, program[steps], final_stack)
    warnings.warn(f'Machine got stuck at instruction {steps} and halted early',
                  MachineHaltedWarning)
  if not FLAGS.stack and len(final_stack) != 1: warnings.warn(
      f'Program left {len(final_stack)} values on the stack, not 1',
      MachineHaltedWarning)

  print(' '.join(arithm_naturals.to_digits(v) for v in final_stack),
        file=stdout)


if __name__ == '__main__':
  FLAGS = _define_flags().parse_args()
  main(FLAGS)
