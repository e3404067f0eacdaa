"""Go AST lowering using tree-sitter."""

import threading
from typing import Any

from tree_sitter_language_pack import get_parser

from .go_nodes import (
    Assign,
    Block,
    Call,
    CompositeLit,
    FuncDecl,
    Ident,
    KeyValue,
    Node,
    Other,
    Return,
    Selector,
    SourceFile,
    StringLit,
    Unary,
)

# tree-sitter parsers are not safe to share between threads
_local = threading.local()

_IDENTIFIER_TYPES = ("identifier", "field_identifier", "type_identifier", "package_identifier")
_STRING_TYPES = ("interpreted_string_literal", "raw_string_literal")
_SKIPPED_DECLS = ("package_clause", "import_declaration", "comment")


def get_go_parser() -> Any:
    """Return this thread's Go parser, creating it on first use."""
    parser = getattr(_local, "parser", None)
    if parser is None:
        parser = get_parser("go")
        _local.parser = parser
    return parser


def _get_node_text(node: Any) -> str:
    """Extract text from a tree-sitter node."""
    if node is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def _find_child_by_type(node: Any, child_type: str) -> Any | None:
    """Find first child of given type."""
    if node is None:
        return None
    for child in node.children:
        if child.type == child_type:
            return child
    return None


def _find_children_by_type(node: Any, child_type: str) -> list[Any]:
    """Find all children of given type."""
    if node is None:
        return []
    return [child for child in node.children if child.type == child_type]


def _named(node: Any) -> list[Any]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def _line(node: Any) -> int:
    return node.start_point[0] + 1


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "`"):
        return text[1:-1]
    return text


def _compact(text: str) -> str:
    """Drop whitespace so type text compares independently of formatting."""
    return "".join(text.split())


def parse_go_source(content: bytes | str) -> SourceFile:
    """Parse Go source and lower it into typed nodes."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    tree = get_go_parser().parse(content)
    return lower_tree(tree)


def lower_tree(tree: Any) -> SourceFile:
    """Lower a tree-sitter Go tree into a ``SourceFile``."""
    root = tree.root_node
    package = ""
    pkg_clause = _find_child_by_type(root, "package_clause")
    if pkg_clause is not None:
        package = _get_node_text(_find_child_by_type(pkg_clause, "package_identifier"))

    decls = [lower(child) for child in root.named_children if child.type not in _SKIPPED_DECLS]
    return SourceFile(line=1, package=package, decls=decls)


def lower(node: Any) -> Node:
    """Lower one tree-sitter node (statement or expression)."""
    kind = node.type

    if kind in _IDENTIFIER_TYPES:
        return Ident(line=_line(node), name=_get_node_text(node))

    if kind in _STRING_TYPES:
        return StringLit(line=_line(node), value=_unquote(_get_node_text(node)))

    if kind in ("function_declaration", "method_declaration"):
        return _lower_function(node)

    if kind == "block":
        return Block(line=_line(node), statements=_lower_statements(node))

    if kind == "return_statement":
        values: list[Node] = []
        expr_list = _find_child_by_type(node, "expression_list")
        if expr_list is not None:
            values = _lower_list(expr_list)
        else:
            values = [lower(child) for child in _named(node)]
        return Return(line=_line(node), values=values)

    if kind in ("short_var_declaration", "assignment_statement"):
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        return Assign(
            line=_line(node),
            targets=_lower_list(left),
            values=_lower_list(right),
            define=kind == "short_var_declaration",
        )

    if kind == "var_spec":
        names = [lower(n) for n in _find_children_by_type(node, "identifier")]
        expr_list = _find_child_by_type(node, "expression_list")
        return Assign(line=_line(node), targets=names, values=_lower_list(expr_list), define=True)

    if kind == "composite_literal":
        type_node = node.child_by_field_name("type")
        body = node.child_by_field_name("body")
        return CompositeLit(
            line=_line(node),
            type_name=_compact(_get_node_text(type_node)),
            elements=_lower_elements(body),
        )

    if kind == "literal_value":
        return CompositeLit(line=_line(node), type_name="", elements=_lower_elements(node))

    if kind == "literal_element":
        inner = _named(node)
        if len(inner) == 1:
            return lower(inner[0])

    if kind == "keyed_element":
        parts = _named(node)
        if len(parts) == 2:
            return KeyValue(line=_line(node), key=lower(parts[0]), value=lower(parts[1]))

    if kind == "parenthesized_expression":
        inner = _named(node)
        if len(inner) == 1:
            return lower(inner[0])

    if kind == "selector_expression":
        return Selector(
            line=_line(node),
            operand=lower(node.child_by_field_name("operand")),
            field=_get_node_text(node.child_by_field_name("field")),
        )

    if kind == "qualified_type":
        package = node.child_by_field_name("package")
        return Selector(
            line=_line(node),
            operand=Ident(line=_line(package), name=_get_node_text(package)),
            field=_get_node_text(node.child_by_field_name("name")),
        )

    if kind == "call_expression":
        arguments = node.child_by_field_name("arguments")
        return Call(
            line=_line(node),
            func=lower(node.child_by_field_name("function")),
            args=[lower(arg) for arg in _named(arguments)] if arguments is not None else [],
        )

    if kind == "unary_expression":
        return Unary(
            line=_line(node),
            op=_get_node_text(node.child_by_field_name("operator")),
            operand=lower(node.child_by_field_name("operand")),
        )

    return Other(line=_line(node), kind=kind, items=[lower(child) for child in _named(node)])


def _lower_list(node: Any) -> list[Node]:
    """Lower an expression_list (or a single expression) into a list."""
    if node is None:
        return []
    if node.type == "expression_list":
        return [lower(child) for child in _named(node)]
    return [lower(node)]


def _lower_statements(block: Any) -> list[Node]:
    """Lower block statements, flattening grammar versions that wrap them in statement_list."""
    statements = []
    for child in _named(block):
        if child.type == "statement_list":
            statements.extend(lower(stmt) for stmt in _named(child))
        else:
            statements.append(lower(child))
    return statements


def _lower_elements(literal_value: Any) -> list[Node]:
    if literal_value is None:
        return []
    return [lower(child) for child in _named(literal_value)]


def _lower_function(node: Any) -> FuncDecl:
    name = _get_node_text(node.child_by_field_name("name"))

    receiver_type = ""
    receiver_pointer = False
    if node.type == "method_declaration":
        receiver_type, receiver_pointer = _receiver_type(node.child_by_field_name("receiver"))

    body_node = node.child_by_field_name("body")
    body = lower(body_node) if body_node is not None else None

    return FuncDecl(
        line=_line(node),
        name=name,
        receiver_type=receiver_type,
        receiver_pointer=receiver_pointer,
        result_types=_result_types(node.child_by_field_name("result")),
        body=body if isinstance(body, Block) else None,
    )


def _receiver_type(receiver_list: Any) -> tuple[str, bool]:
    """Return (underlying type name, is_pointer) for a method receiver."""
    if receiver_list is None:
        return "", False

    param = _find_child_by_type(receiver_list, "parameter_declaration")
    if param is None:
        return "", False

    type_node = param.child_by_field_name("type")
    pointer = False
    while type_node is not None and type_node.type in ("pointer_type", "parenthesized_type"):
        if type_node.type == "pointer_type":
            pointer = True
        inner = _named(type_node)
        type_node = inner[0] if inner else None

    if type_node is not None and type_node.type == "generic_type":
        type_node = type_node.child_by_field_name("type")

    return _get_node_text(type_node), pointer


def _result_types(result: Any) -> list[str]:
    if result is None:
        return []
    if result.type != "parameter_list":
        return [_compact(_get_node_text(result))]

    types = []
    for param in _find_children_by_type(result, "parameter_declaration"):
        type_text = _compact(_get_node_text(param.child_by_field_name("type")))
        names = _find_children_by_type(param, "identifier")
        types.extend([type_text] * max(1, len(names)))
    return types
