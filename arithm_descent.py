"""Utilities for descending into arithm syntax trees.

Forfeited into the public domain with NO WARRANTY. Read LICENSE for details.

Functions in this module include `scan`, a fully-general recursive-descent
helper that doesn't actually recurse, and `fold`, a bottom-up reduction built
on top of it. Neither uses the Python call stack to keep track of where it is
in the tree, so both are happy with trees that are many thousands of nodes
deep. The evaluator, the code generator, and the pretty-printer all make use
of these helpers.
"""

import arithm_ast

from typing import Callable, Protocol, Sequence, TypeVar


TState = TypeVar('TState', contravariant=True)
TResult = TypeVar('TResult', covariant=True)
TFold = TypeVar('TFold')
TScanTodos = list[
    tuple['Callback[TResult, TState]', arithm_ast.AstNode, TState]]


class Callback(Protocol[TResult, TState]):
  def __call__(self,
               ast: arithm_ast.AstNode,
               state: TState,
               todos: TScanTodos) -> TResult:
    """A function signature for callbacks used by scan.

    Args:
      ast: Current syntax tree node encountered in the traversal.
      state: Arbitrary state data passed this Callback.
      todos: Mutable list of syntax tree nodes to traverse next, in reverse
          order, along with the callbacks to use to traverse them and an
          arbitrary state item to pass to those callbacks. Typically, any one
          callback will need to add entries to this list based on the contents
          of `ast` in order for the traversal to include children of `ast`.
          Appending those entries to the end of the list yields a depth-first
          search. Empty the list (`del todos[:]`) to cease the traversal.

    Returns:
      An arbitrary value. See scan documentation for more details.
    """
    ...


def scan(callback: Callback[TResult, TState],
         ast: arithm_ast.AstNode, state: TState) -> TResult:
  """General-purpose syntax tree scanner.

  Invokes callbacks (see `Callback`) on nodes of a syntax tree that have been
  accumulated into an internal list used as a stack (let's call it `todos`).
  Nodes and callbacks are popped off of the end of `todos`. The callbacks can
  add new node-callback pairs to `todos` in order to visit new places in the
  tree. If a callback adds all children of a node, then a complete traversal
  is achieved.

  Args:
    callback: Callback to apply to the starting node `ast`.
    ast: Starting node for the scan.
    state: State to pass to the callback as it processes `ast`.

  Returns:
    Whatever was returned by the last callback to be called.
  """
  todos: TScanTodos = [(callback, ast, state)]
  while todos:
    next_callback, next_ast, next_state = todos.pop()
    result = next_callback(next_ast, next_state, todos)
  return result


def fold(callback: Callable[[arithm_ast.AstNode, Sequence[TFold]], TFold],
         ast: arithm_ast.AstNode) -> TFold:
  """Bottom-up reduction of a syntax tree.

  Calls `callback` once for every node in the tree, children before parents
  and left children before right children. The second argument to the
  callback is the sequence of values that the callback returned for the
  node's children (in left-to-right order); for leaves, it's empty.

  Args:
    callback: Combines a node with the results computed for its children.
    ast: Root of the syntax tree to reduce.

  Returns:
    The value the callback computed for `ast`.
  """
  # Results for finished subtrees pile up here. A node's children always
  # finish immediately before the node does, so their results are the last
  # few items on this list when the node's turn comes.
  results: list[TFold] = []

  def visit(node: arithm_ast.AstNode, _, todos: TScanTodos) -> None:
    kids = children(node)
    todos.append((combine, node, len(kids)))
    todos.extend((visit, kid, None) for kid in reversed(kids))

  def combine(node: arithm_ast.AstNode, arity: int, _) -> TFold:
    operands = tuple(results[len(results) - arity:])
    del results[len(results) - arity:]
    results.append(callback(node, operands))
    return results[-1]

  return scan(visit, ast, None)


### Utilities ###


def children(ast: arithm_ast.AstNode) -> list[arithm_ast.AstNode]:
  """Retrieve all syntax tree node children of this node, left to right."""
  kids: list[arithm_ast.AstNode] = []
  for sub_ast in ast.__dict__.values():
    if isinstance(sub_ast, (tuple, list)):
      kids.extend(n for n in sub_ast if isinstance(n, arithm_ast.AstNode))
    elif isinstance(sub_ast, arithm_ast.AstNode):
      kids.append(sub_ast)
  return kids
