"""Natural numbers, the only kind of value arithm expressions compute.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

Naturals are plain Python integers that happen to be non-negative. Python
integers are unbounded, so there are no overflow rules to speak of. One thing
that needs care is subtraction, which "bottoms out" at zero instead of going
negative. Both the evaluator and the stack machine use `monus` for this. The
other is text: `int` and `str` refuse numbers with more than a few thousand
digits, so everything that reads or writes naturals as text goes through
`from_digits` and `to_digits` instead.
"""

from typing import Any


Natural = int


def check_natural(value: Any, what: str = 'value') -> Natural:
  """Make sure that `value` is a natural number.

  Args:
    value: Value to check.
    what: Describes `value` in error messages.

  Returns:
    `value`, unchanged.

  Raises:
    TypeError: `value` is not an integer (booleans don't count).
    ValueError: `value` is a negative integer.
  """
  if isinstance(value, bool) or not isinstance(value, int): raise TypeError(
      f'{what} must be a natural number, not {type(value).__name__}')
  if value < 0: raise ValueError(
      f'{what} must be a natural number, not {value}')
  return value


def monus(minuend: Natural, subtrahend: Natural) -> Natural:
  """Truncating subtraction: `minuend - subtrahend`, or 0 if that's negative."""
  return minuend - subtrahend if minuend > subtrahend else 0


# Python refuses to convert integers with more than a few thousand digits to or
# from text in one go, so conversions longer than this go a chunk at a time.
_CHUNK_DIGITS = 1000
_CHUNK_BASE = 10 ** _CHUNK_DIGITS


def from_digits(digits: str) -> Natural:
  """Convert a string of decimal digits into a natural number.

  Unlike `int`, there is no limit on the number of digits.

  Args:
    digits: One or more ASCII decimal digits and nothing else.

  Returns:
    The natural number that `digits` spell out.

  Raises:
    ValueError: `digits` is empty or contains a non-digit.
  """
  if not (digits.isascii() and digits.isdigit()): raise ValueError(
      f'Not a natural number: {digits[:40]!r}')
  value = 0
  for start in range(0, len(digits), _CHUNK_DIGITS):
    chunk = digits[start:start + _CHUNK_DIGITS]
    value = value * 10 ** len(chunk) + int(chunk)
  return value


def to_digits(value: Natural) -> str:
  """Convert a natural number to decimal digits, however many there are."""
  check_natural(value)
  chunks: list[str] = []
  while value >= _CHUNK_BASE:
    value, chunk = divmod(value, _CHUNK_BASE)
    chunks.append(f'{chunk:0{_CHUNK_DIGITS}d}')
  chunks.append(str(value))
  return ''.join(reversed(chunks))
