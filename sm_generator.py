"""Stack machine code generation for arithm expressions.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

Compiling an expression for the stack machine is a matter of compiling its
operands, left one first, and then appending the instruction for the
operator:

   Const(n)       ->  Push(n)
   Plus(a, b)     ->  <code for a>  <code for b>  Add
   Minus(a, b)    ->  <code for a>  <code for b>  Sub
   Mult(a, b)     ->  <code for a>  <code for b>  Mul

Code for any subexpression leaves exactly one new value on top of the stack
and never touches anything beneath it, so the code for `a` and `b` works the
same wherever it ends up. Run from an empty stack, the code for a whole
expression leaves just the value of the expression.

Since every operator comes after its operands, the code is simply a
post-order walk of the syntax tree. That's how `expression` generates it, all
in one pass, rather than by splicing together lots of little programs.
"""

import arithm_ast
import arithm_descent
import sm_instructions


def expression(ast: arithm_ast.Expression) -> sm_instructions.Program:
  """Generate stack machine code that computes an expression.

  Args:
    ast: Expression to compile.

  Returns:
    A program that pushes the value of `ast` onto the stack.
  """
  code: list[sm_instructions.Instruction] = []

  # Schedule an emit for the node itself, then visits for its children on top
  # of that, so the children's code comes out first.
  def visit(node: arithm_ast.AstNode, _, todos: arithm_descent.TScanTodos):
    todos.append((emit, node, None))
    todos.extend((visit, kid, None)
                 for kid in reversed(arithm_descent.children(node)))

  def emit(node: arithm_ast.AstNode, _, todos: arithm_descent.TScanTodos):
    code.append(_instruction(node))

  arithm_descent.scan(visit, ast, None)
  return tuple(code)


def _instruction(ast: arithm_ast.AstNode) -> sm_instructions.Instruction:
  """The instruction that finishes the code for a syntax tree node."""
  match ast:
    case arithm_ast.Const(value=value):
      return sm_instructions.Push(value)
    case arithm_ast.Plus():
      return sm_instructions.Add()
    case arithm_ast.Minus():
      return sm_instructions.Sub()
    case arithm_ast.Mult():
      return sm_instructions.Mul()
    case _:
      raise _InternalError(f'Not an arithm expression: {ast!r}')


class _InternalError(RuntimeError):
  """An uninformative exception for "this shouldn't happen" errors."""
