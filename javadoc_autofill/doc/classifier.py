"""
One-line behavioural description of a method, inferred purely from its
name and the shape of its body. First matching rule wins.
"""
from dataclasses import dataclass
from typing import Any, Iterator, Tuple

import javalang  # type: ignore

DATA_STORE_WORDS = ("save", "update", "delete", "insert")
LOGGING_WORDS = ("log", "debug", "info")

_CALLS = (javalang.tree.MethodInvocation, javalang.tree.SuperMethodInvocation)
_BRANCHES = (javalang.tree.IfStatement, javalang.tree.SwitchStatement)
_LOOPS = (javalang.tree.ForStatement, javalang.tree.WhileStatement, javalang.tree.DoStatement)


def iter_nodes(node: Any) -> Iterator[javalang.ast.Node]:
    """
    Pre-order traversal over a javalang subtree (or a list of statements).
    Non-node children such as modifier sets and strings are skipped.
    """
    if node is None:
        return
    if isinstance(node, (list, tuple)):
        for item in node:
            yield from iter_nodes(item)
        return
    if not isinstance(node, javalang.ast.Node):
        return
    yield node
    for child in node.children:
        yield from iter_nodes(child)


@dataclass(frozen=True)
class BodyFacts:
    calls: Tuple[str, ...] = ()
    branches: int = 0
    loops: int = 0
    returns: int = 0
    throws: int = 0

    @classmethod
    def collect(cls, body: Any) -> "BodyFacts":
        calls = []
        branches = loops = returns = throws = 0
        for n in iter_nodes(body):
            if isinstance(n, _CALLS):
                calls.append(n.member or "")
            elif isinstance(n, _BRANCHES):
                branches += 1
            elif isinstance(n, _LOOPS):
                loops += 1
            elif isinstance(n, javalang.tree.ReturnStatement):
                returns += 1
            elif isinstance(n, javalang.tree.ThrowStatement):
                throws += 1
        return cls(tuple(calls), branches, loops, returns, throws)

    def calls_containing(self, *words: str) -> bool:
        return any(w in c.lower() for c in self.calls for w in words)


# (predicate(name, facts), template) in priority order
_RULES = (
    (lambda name, f: name.startswith("get"), "retrieves {rest}"),
    (lambda name, f: name.startswith("set"), "sets {rest}"),
    (lambda name, f: any("find" in c for c in f.calls), "queries and returns related data"),
    (lambda name, f: f.calls_containing(*DATA_STORE_WORDS), "performs a data-store operation"),
    (lambda name, f: f.branches > 0 and f.returns > 0, "returns different results based on a condition"),
    (lambda name, f: f.loops > 0, "iterates over and processes a collection"),
    (lambda name, f: f.returns > 0, "returns a computed result"),
    (lambda name, f: f.throws > 0, "performs an operation and raises an exception"),
    (lambda name, f: f.calls_containing(*LOGGING_WORDS), "performs a logging operation"),
)

_DEFAULT = "performs the {name} operation"


def classify(method: Any) -> str:
    """
    `method` is anything with `name` and `body` (a javalang statement list,
    or None for abstract methods).
    """
    name = method.name or ""
    facts = BodyFacts.collect(getattr(method, "body", None))
    for matches, template in _RULES:
        if matches(name, facts):
            return template.format(name=name, rest=name[3:])
    return _DEFAULT.format(name=name)
