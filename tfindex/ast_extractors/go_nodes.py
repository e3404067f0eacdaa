"""Typed Go syntax nodes consumed by the registration extractors.

The tree-sitter tree is lowered into this closed set of node kinds so the
extractors can pattern-match with isinstance checks instead of switching on
raw grammar node type strings. Anything the extractors never look at is kept
as an ``Other`` node so walks still reach nested statements.
"""

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass
class Node:
    """Base class for all lowered nodes."""

    line: int

    def children(self) -> list["Node"]:
        return []


@dataclass
class Ident(Node):
    name: str


@dataclass
class StringLit(Node):
    """Interpreted or raw string literal, stored unquoted."""

    value: str


@dataclass
class Selector(Node):
    """Qualified identifier or field access (``pkg.Name``, ``x.TypeName``)."""

    operand: Node
    field: str

    def children(self) -> list[Node]:
        return [self.operand]


@dataclass
class Call(Node):
    func: Node
    args: list[Node]

    def children(self) -> list[Node]:
        return [self.func, *self.args]


@dataclass
class Unary(Node):
    op: str
    operand: Node

    def children(self) -> list[Node]:
        return [self.operand]


@dataclass
class KeyValue(Node):
    key: Node
    value: Node

    def children(self) -> list[Node]:
        return [self.key, self.value]


@dataclass
class CompositeLit(Node):
    """Composite literal; ``type_name`` is empty for elided nested types."""

    type_name: str
    elements: list[Node]

    def children(self) -> list[Node]:
        return list(self.elements)


@dataclass
class Return(Node):
    values: list[Node]

    def children(self) -> list[Node]:
        return list(self.values)


@dataclass
class Assign(Node):
    """Assignment, short variable declaration or ``var`` spec."""

    targets: list[Node]
    values: list[Node]
    define: bool

    def children(self) -> list[Node]:
        return [*self.targets, *self.values]


@dataclass
class Block(Node):
    statements: list[Node]

    def children(self) -> list[Node]:
        return list(self.statements)


@dataclass
class Other(Node):
    """Any construct without a dedicated kind (if, for, switch, func literal...)."""

    kind: str
    items: list[Node]

    def children(self) -> list[Node]:
        return list(self.items)


@dataclass
class FuncDecl(Node):
    """Function or method declaration.

    ``receiver_type`` is the receiver's underlying type identifier with any
    pointer indirection removed, or an empty string for plain functions.
    """

    name: str
    receiver_type: str
    receiver_pointer: bool
    result_types: list[str]
    body: Block | None

    @property
    def is_method(self) -> bool:
        return bool(self.receiver_type)

    def children(self) -> list[Node]:
        return [self.body] if self.body is not None else []


@dataclass
class SourceFile(Node):
    package: str
    decls: list[Node]

    @property
    def functions(self) -> list[FuncDecl]:
        return [decl for decl in self.decls if isinstance(decl, FuncDecl)]

    def children(self) -> list[Node]:
        return list(self.decls)


def walk(node: Node | None) -> Iterator[Node]:
    """Yield ``node`` and every descendant in depth-first pre-order."""
    if node is None:
        return
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))


def unwrap_literal(expr: Node | None) -> CompositeLit | None:
    """Return the composite literal behind ``Lit{}`` or ``&Lit{}``."""
    if isinstance(expr, Unary) and expr.op == "&":
        expr = expr.operand
    if isinstance(expr, CompositeLit):
        return expr
    return None


def callable_name(expr: Node | None) -> str | None:
    """Name of a bare or package-qualified identifier (trailing part only)."""
    if isinstance(expr, Ident):
        return expr.name
    if isinstance(expr, Selector):
        return expr.field
    return None
