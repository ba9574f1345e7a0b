"""Tests for the arithm_compiler module.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

These are more like integration tests for the whole toolchain: text goes in,
and assembly code or the value of the expression comes out.
"""

import argparse
import io
import os
import tempfile
import unittest
import unittest.mock

import arithm_compiler
import arithm_evaluator
import arithm_naturals
import arithm_parser
import sm_generator

from sm_instructions import Add, Mul, Push, Sub


def parse_flags(*args: str) -> argparse.Namespace:
  """Parse command-line flags the way the compiler's main program does."""
  flags = arithm_compiler._define_flags()
  for _, compiler_class in sorted(arithm_compiler._compiler_classes().items()):
    compiler_class.define_flags(flags)
  return flags.parse_args(list(args))


class ArithmCompilerTest(unittest.TestCase):
  """Test harness for testing the arithm_compiler module."""

  def test_compile(self):
    """Compiling expression text yields stack machine code."""
    compiler = arithm_compiler.StackMachineCompiler()
    self.assertEqual(compiler.compile('2 * (3 - 1) + 4'), (
        Push(2), Push(3), Push(1), Sub(), Mul(), Push(4), Add()))

  def test_execute(self):
    """Executing compiled code yields the value of the expression."""
    compiler = arithm_compiler.StackMachineCompiler(strict=True, check=True)
    for text, value in [('0', 0), ('0 - 4', 0), ('40 - 3 - 1', 36),
                        ('40 - (3 - 1)', 38), ('2 + 2 * 2', 6),
                        ('(2 + 2) * 2', 8), ('40 - 3 + 1', 38)]:
      with self.subTest(text=text):
        ast = compiler.parse(text)
        self.assertEqual(compiler.execute(compiler.generate(ast), ast), value)

  def test_execute_errors(self):
    """Programs that misbehave, or disagree with the evaluator, are errors."""
    compiler = arithm_compiler.StackMachineCompiler(check=True)
    with self.assertRaisesRegex(RuntimeError, 'left 2 values on the stack'):
      compiler.execute((Push(1), Push(2)))
    with self.assertRaisesRegex(RuntimeError, 'computed 3, but the expression '
                                'evaluates to 2'):
      compiler.execute((Push(1), Push(2), Add()), arithm_parser.parse('1 * 2'))
    # Without checking, disagreements go unnoticed.
    unchecked = arithm_compiler.StackMachineCompiler()
    self.assertEqual(
        unchecked.execute((Push(1), Push(2), Add()),
                          arithm_parser.parse('1 * 2')), 3)

  def test_parse_errors(self):
    """Syntax errors become ValueErrors that say where the problem is."""
    compiler = arithm_compiler.StackMachineCompiler()
    with self.assertRaisesRegex(ValueError, r'Malformed arithm expression in '
                                r'foo\.arithm at line 1, column 5'):
      compiler.compile('1 + x', 'foo.arithm')
    with self.assertRaisesRegex(ValueError, 'Malformed arithm expression at'):
      compiler.compile('1 +* 2')
    with unittest.mock.patch.object(
        arithm_naturals, 'from_digits', side_effect=ValueError('no digits')):
      with self.assertRaisesRegex(ValueError, r'Malformed arithm expression in '
                                  r'foo\.arithm: no digits'):
        compiler.compile('12', 'foo.arithm')

  def test_other_targets(self):
    """The Compiler base class doesn't care what kind of program it makes."""

    class TextCompiler(arithm_compiler.Compiler[str]):
      """Compiles expressions to tidied-up expression text."""
      @classmethod
      def define_flags(cls, flags):
        pass

      @classmethod
      def from_flags(cls, FLAGS):
        return cls()

      def assemble(self, program: str) -> list[str]:
        return [program]

      def execute(self, program: str, ast=None) -> int:
        return arithm_evaluator.evaluate(arithm_parser.parse(program))

      def generate(self, ast) -> str:
        return arithm_parser.unparse(ast)

    compiler = TextCompiler()
    program = compiler.compile('((2)+2) * (2)')
    self.assertEqual(program, '(2 + 2) * 2')
    self.assertEqual(compiler.assemble(program), ['(2 + 2) * 2'])
    self.assertEqual(compiler.execute(program), 8)

  def test_from_flags(self):
    """Compilers are configured by command-line flags."""
    compiler = arithm_compiler.StackMachineCompiler.from_flags(
        parse_flags('--sm-strict', '--sm-check'))
    self.assertEqual(compiler,
                     arithm_compiler.StackMachineCompiler(strict=True,
                                                          check=True))
    compiler = arithm_compiler.StackMachineCompiler.from_flags(parse_flags())
    self.assertEqual(compiler, arithm_compiler.StackMachineCompiler())


class ArithmCompilerMainTest(unittest.TestCase):
  """Test harness for the compiler's command-line program."""

  def run_main(self, FLAGS: argparse.Namespace) -> str:
    """Run the main program, collecting what it writes to FLAGS.output."""
    FLAGS.output = io.StringIO()
    stdout = io.StringIO()
    arithm_compiler.main(FLAGS, stdout)
    return FLAGS.output.getvalue() + stdout.getvalue()

  def test_run(self):
    """By default, the compiler runs the compiled program."""
    self.assertEqual(self.run_main(parse_flags('-e', '21 + 21')), '42\n')
    self.assertEqual(
        self.run_main(parse_flags('-e', '40 - 3 - 1', '--sm-check')), '36\n')

  def test_evaluate(self):
    """--evaluate skips compilation."""
    self.assertEqual(
        self.run_main(parse_flags('-e', '2 * (2 + 2)', '--evaluate')), '8\n')

  def test_source_file(self):
    """Expressions can come from files."""
    with tempfile.TemporaryDirectory() as tmpdir:
      path = os.path.join(tmpdir, 'answer.arithm')
      with open(path, 'w') as f: f.write('(44 - 3) + 1\n')
      FLAGS = parse_flags(path)
      try:
        self.assertEqual(self.run_main(FLAGS), '42\n')
      finally:
        FLAGS.source.close()

  def test_assembly_output(self):
    """-S writes assembly code instead of running the program."""
    FLAGS = parse_flags('-e', '40 - 3 + 1')
    FLAGS.assembly_output = io.StringIO()
    self.assertEqual(self.run_main(FLAGS), '')
    self.assertEqual(FLAGS.assembly_output.getvalue(),
                     'PUSH 40\nPUSH 3\nSUB\nPUSH 1\nADD\n')
    # The listing is what the code generator would make.
    self.assertEqual(
        FLAGS.assembly_output.getvalue().splitlines(),
        arithm_compiler.StackMachineCompiler().assemble(
            sm_generator.expression(arithm_parser.parse('40 - 3 + 1'))))

  def test_version(self):
    """-v lists the version and the available targets."""
    output = self.run_main(parse_flags('-v'))
    self.assertIn(arithm_compiler.__version__, output)
    self.assertIn('\tsm', output)
    self.assertIn('arithm stack machine', output)

  def test_huge_numbers(self):
    """Results can have more digits than Python will usually print."""
    text = '*'.join(['99999999999999999999'] * 250)
    value = (10**20 - 1)**250
    for extra_flags in [(), ('--evaluate',), ('--sm-check', '--sm-strict')]:
      with self.subTest(extra_flags=extra_flags):
        output = self.run_main(parse_flags('-e', text, *extra_flags))
        self.assertEqual(arithm_naturals.from_digits(output.rstrip('\n')),
                         value)
    FLAGS = parse_flags('-e', '1' + '0' * 5000 + ' + 1')
    FLAGS.assembly_output = io.StringIO()
    self.run_main(FLAGS)
    self.assertEqual(FLAGS.assembly_output.getvalue(),
                     'PUSH 1' + '0' * 5000 + '\nPUSH 1\nADD\n')
