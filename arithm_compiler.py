#!/usr/bin/python3
"""The arithm compiler.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

arithm is a language of arithmetic expressions over the natural numbers: you
get literals, addition, multiplication, and subtraction, where subtraction
stops at zero rather than going negative (so `3 - 5` is 0). That's it. There
are no variables, no division, and nothing at all besides one expression.

A language this small doesn't need much of a compiler, but this one has all
the usual parts anyway. The parser (`arithm_parser`) turns expression text into
a syntax tree; the code generator (`sm_generator`) turns the syntax tree into a
program for a small stack machine; and the stack machine interpreter
(`sm_interpreter`) runs the program. Off to one side, the evaluator
(`arithm_evaluator`) works out the value of the syntax tree directly. The
compiled program and the evaluator must always agree, and with the --sm-check
flag, the compiler will make sure that they do.

Should you want to compile for some other machine, add a target-specific
subclass of `Compiler` and then add it to the dict returned by
`_compiler_classes`.

But if all you want to know is how to run the compiler, just execute this
program with the -h flag.
"""

import abc
import argparse
import dataclasses
import functools
import sys

import lark

import arithm_ast
import arithm_evaluator
import arithm_naturals
import arithm_parser
import sm_assembler
import sm_generator
import sm_instructions
import sm_interpreter

from typing import Generic, Mapping, Optional, Sequence, TextIO, TypeVar


__version__ = 'arithm compiler 0.1 circa October 2026'


# Whatever a target's code generator makes: instructions, assembly text, etc.
TProgram = TypeVar('TProgram')


def _define_flags():
  """Defines an `ArgumentParser` for command-line flags used by this program."""
  flags = argparse.ArgumentParser(
      description=(__version__),
      formatter_class=argparse.ArgumentDefaultsHelpFormatter)

  flags.add_argument('source', nargs='?', default='-',
                     help=('File holding the expression to compile; omit to '
                           'read the expression from standard input'),
                     type=argparse.FileType('r'))

  flags.add_argument('-e', '--expression',
                     help=('Compile this expression instead of reading one '
                           'from a file'),
                     metavar='EXPRESSION', type=str)

  flags.add_argument('-o', '--output', default='-',
                     help=('Where to write the result; omit to write to '
                           'standard out'),
                     metavar='FILENAME', type=argparse.FileType('w'))

  flags.add_argument('-t', '--target', default='sm',
                     help='Compilation target: targets are described in -v',
                     choices=_compiler_classes().keys(),
                     type=str)

  flags.add_argument('-S', '--assembly-output', nargs='?', const=sys.stdout,
                     help=('Write compiled assembly code to a file, or if '
                           "'-', to standard output; running the compiled "
                           'program is suppressed'),
                     metavar='FILENAME', type=argparse.FileType('w'))

  flags.add_argument('--evaluate',
                     default=False, action=argparse.BooleanOptionalAction,
                     help=('Evaluate the expression directly instead of '
                           'compiling and running it'))

  flags.add_argument('-v', '--version',
                     default=False, action=argparse.BooleanOptionalAction,
                     help='Print version and target option listing, then exit')

  return flags


##########################
#### COMPILER CLASSES ####
##########################


@functools.cache
def _compiler_classes() -> Mapping[str, type['Compiler']]:
  """Construct mapping from target strings to Compiler subclasses.

  Keys in this dict are valid arguments to the -t flag.

  Returns:
    The mapping described.
  """
  return {
      'sm': StackMachineCompiler,
  }


class Compiler(abc.ABC, Generic[TProgram]):
  """Base class for an arithm compiler.

  Subclasses of this class will fill in the abstract methods for specific
  targets. The type parameter is the type of the programs that the target's
  code generator emits.

  Note that the first line of Compiler subclass docstrings will be used
  in the target listing output for the -v flag.
  """

  @classmethod
  @abc.abstractmethod
  def define_flags(cls, flags: argparse.ArgumentParser):
    """Add target-specific flags to the compiler's command-line flags."""

  @classmethod
  @abc.abstractmethod
  def from_flags(cls, FLAGS: argparse.Namespace) -> 'Compiler':
    """Construct a target-specific Compiler configured by command-line flags."""

  def compile(
      self,
      source_text: str,
      filename: Optional[str] = None,
  ) -> TProgram:
    """Compile an expression into a target-specific program.

    Args:
      source_text: Text of the expression to compile.
      filename: Filename for the source text, or None if the text originated
          elsewhere. Used for error messages.

    Returns:
      Target-specific program that computes the expression.
    """
    return self.generate(self.parse(source_text, filename))

  def parse(
      self,
      source_text: str,
      filename: Optional[str] = None,
  ) -> arithm_ast.Expression:
    """Parse an expression, with the filename in any error message."""
    try:
      return arithm_parser.parse(source_text)
    except lark.exceptions.UnexpectedInput as e:
      raise ValueError(
          f'Malformed arithm expression{_where(filename)} at line {e.line}, '
          f'column {e.column}') from e
    except lark.exceptions.VisitError as e:
      raise ValueError(f'Malformed arithm expression{_where(filename)}: '
                       f'{e.orig_exc}') from e

  @abc.abstractmethod
  def assemble(self, program: TProgram) -> Sequence[str]:
    """Target-specific assembly listing for a compiled program."""

  @abc.abstractmethod
  def execute(
      self,
      program: TProgram,
      ast: Optional[arithm_ast.Expression] = None,
  ) -> arithm_naturals.Natural:
    """Run a compiled program and return the value it computes.

    Args:
      program: Program emitted by `generate`.
      ast: If not None, the expression that `program` was compiled from.
          Implementations may check the result against the value that the
          evaluator computes for it.

    Returns:
      The value computed by the program.
    """

  @abc.abstractmethod
  def generate(self, ast: arithm_ast.Expression) -> TProgram:
    """Target-specific code generation for a parsed expression."""


@dataclasses.dataclass
class StackMachineCompiler(Compiler[sm_instructions.Program]):
  """arithm stack machine

  This compiler subclass generates code for the arithm stack machine in
  `sm_interpreter`.

  Attributes:
    strict: Whether the stack machine should raise an error if it gets stuck,
        rather than halting quietly. (Compiled code never gets stuck, so this
        only matters if something has gone badly wrong.)
    check: Whether to check the compiled program's result against the
        result computed directly by the evaluator.
  """
  strict: bool = False
  check: bool = False

  @classmethod
  def define_flags(cls, flags: argparse.ArgumentParser):
    """Add stack-machine-specific flags to the compiler's command-line flags."""
    flags.add_argument('--sm-strict', default=cls.strict,
                       action=argparse.BooleanOptionalAction,
                       help=('<sm> Raise an error instead of halting quietly '
                             'if the stack machine gets stuck'))
    flags.add_argument('--sm-check', default=cls.check,
                       action=argparse.BooleanOptionalAction,
                       help=('<sm> Check the compiled program computes the '
                             'same value as direct evaluation'))

  @classmethod
  def from_flags(cls, FLAGS: argparse.Namespace) -> Compiler:
    """Construct a StackMachineCompiler configured by command-line flags."""
    return cls(strict=FLAGS.sm_strict, check=FLAGS.sm_check)

  def assemble(self, program: sm_instructions.Program) -> Sequence[str]:
    """Stack machine assembly listing for a compiled program."""
    return sm_assembler.disassemble(program)

  def execute(
      self,
      program: sm_instructions.Program,
      ast: Optional[arithm_ast.Expression] = None,
  ) -> arithm_naturals.Natural:
    """Run a compiled program on the stack machine from an empty stack."""
    stack = sm_interpreter.run(program, [], strict=self.strict)
    if len(stack) != 1: raise RuntimeError(
        f'Compiled program left {len(stack)} values on the stack, not 1')
    [result] = stack
    if self.check and ast is not None:
      expected = arithm_evaluator.evaluate(ast)
      if result != expected: raise RuntimeError(
          f'Compiled program computed {arithm_naturals.to_digits(result)}, but '
          f'the expression evaluates to {arithm_naturals.to_digits(expected)}')
    return result

  def generate(self, ast: arithm_ast.Expression) -> sm_instructions.Program:
    """Stack machine code generation for a parsed expression."""
    return sm_generator.expression(ast)


def _where(filename: Optional[str]) -> str:
  """Name the file in an error message, if there is a file to name."""
  return f' in {filename}' if filename is not None else ''


######################
#### MAIN PROGRAM ####
######################


def main(FLAGS: argparse.Namespace, stdout: Optional[TextIO] = None):
  """For when the compiler is run as a standalone executable."""
  stdout = stdout or sys.stdout

  # Print version and target information and exit, if requested.
  if FLAGS.version:
    print(__version__, file=stdout)
    print('Targets available:', file=stdout)
    for target, cls in _compiler_classes().items():
      detail = cls.__doc__.splitlines()[0] if cls.__doc__ is not None else ''
      print(f'\t{target:16}{detail}', file=stdout)
    return

  # Prepare compiler object for the selected target.
  try:
    compiler = _compiler_classes()[FLAGS.target].from_flags(FLAGS)
  except KeyError:
    raise ValueError(f'Unrecognised target {FLAGS.target}')

  # Load the expression: from the -e flag if supplied, from a file otherwise.
  if FLAGS.expression is not None:
    source_text, filename = FLAGS.expression, None
  else:
    source_text, filename = FLAGS.source.read(), FLAGS.source.name

  # Evaluate directly if asked to; otherwise compile and then either write
  # out assembly or run the program.
  ast = compiler.parse(source_text, filename)
  if FLAGS.evaluate:
    value = arithm_evaluator.evaluate(ast)
  else:
    program = compiler.generate(ast)
    if FLAGS.assembly_output is not None:
      FLAGS.assembly_output.write('\n'.join(compiler.assemble(program)) + '\n')
      return
    value = compiler.execute(program, ast)
  FLAGS.output.write(arithm_naturals.to_digits(value) + '\n')


if __name__ == '__main__':
  # Define command-line flags, including target-specific ones.
  flags = _define_flags()
  for _, compiler_class in sorted(_compiler_classes().items()):
    compiler_class.define_flags(flags)
  # Parse flags and call main()
  FLAGS = flags.parse_args()
  main(FLAGS)
