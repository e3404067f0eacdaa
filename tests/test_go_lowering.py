"""
Go lowering tests - tree-sitter trees converted to typed nodes.

These parse real Go source with the tree-sitter Go grammar and check the
typed node tree the extractors depend on.
"""

from tfindex.ast_extractors import go_impl
from tfindex.ast_extractors.go_nodes import (
    Assign,
    Call,
    CompositeLit,
    FuncDecl,
    Ident,
    KeyValue,
    Return,
    Selector,
    StringLit,
    Unary,
    callable_name,
    unwrap_literal,
    walk,
)


def parse_go(parser, code: str):
    """Helper to parse Go code."""
    return parser.parse(code.encode("utf-8"))


def first_return(func: FuncDecl) -> Return:
    return next(node for node in walk(func.body) if isinstance(node, Return))


class TestDeclarations:
    """Function and method declarations."""

    def test_package_and_functions(self, go_parser):
        """Test package name, function order and result types."""
        code = """package network

func resourceVirtualNetwork() *pluginsdk.Resource { return nil }

func helper(a, b int) (x int, err error) { return 0, nil }
"""
        source = go_impl.lower_tree(parse_go(go_parser, code))

        assert source.package == "network"
        names = [f.name for f in source.functions]
        assert names == ["resourceVirtualNetwork", "helper"]

        resource_fn = source.functions[0]
        assert resource_fn.is_method is False
        assert resource_fn.result_types == ["*pluginsdk.Resource"]
        assert resource_fn.line == 3

    def test_named_results_expand_per_name(self, go_parser):
        """Test grouped named results repeat their type per name."""
        code = """package p
func split() (a, b string, err error) { return "", "", nil }
"""
        source = go_impl.lower_tree(parse_go(go_parser, code))

        assert source.functions[0].result_types == ["string", "string", "error"]

    def test_value_receiver(self, go_parser):
        """Test method with a value receiver."""
        code = """package p
func (r FooResource) ResourceType() string { return "x_foo" }
"""
        func = go_impl.lower_tree(parse_go(go_parser, code)).functions[0]

        assert func.name == "ResourceType"
        assert func.receiver_type == "FooResource"
        assert func.receiver_pointer is False
        assert func.is_method is True

    def test_pointer_receiver_without_name(self, go_parser):
        """Test anonymous pointer receiver."""
        code = """package p
func (*FooResource) ResourceType() string { return "x_foo" }
"""
        func = go_impl.lower_tree(parse_go(go_parser, code)).functions[0]

        assert func.receiver_type == "FooResource"
        assert func.receiver_pointer is True

    def test_imports_and_types_are_not_functions(self, go_parser):
        """Test non-function declarations are not listed as functions."""
        code = """package p

import "fmt"

type Registration struct{}

var x = 1
"""
        source = go_impl.lower_tree(parse_go(go_parser, code))

        assert source.functions == []


class TestExpressions:
    """Literals, calls, selectors and assignments."""

    def test_map_literal_with_calls(self, go_parser):
        """Test map literal keys and call values."""
        code = """package p
func f() map[string]*pluginsdk.Resource {
    return map[string]*pluginsdk.Resource{
        "x_a": makeA(),
        "x_b": pkg.MakeB(),
    }
}
"""
        func = go_impl.lower_tree(parse_go(go_parser, code)).functions[0]
        literal = unwrap_literal(first_return(func).values[0])

        assert isinstance(literal, CompositeLit)
        assert literal.type_name == "map[string]*pluginsdk.Resource"
        assert len(literal.elements) == 2

        first, second = literal.elements
        assert isinstance(first, KeyValue)
        assert first.key == StringLit(line=first.key.line, value="x_a")
        assert isinstance(first.value, Call)
        assert isinstance(first.value.func, Ident)
        assert first.value.func.name == "makeA"

        assert isinstance(second.value.func, Selector)
        assert second.value.func.field == "MakeB"

    def test_address_of_literal(self, go_parser):
        """Test &T{} lowering and key identifiers."""
        code = """package p
func f() *pluginsdk.Resource {
    return &pluginsdk.Resource{Create: create}
}
"""
        func = go_impl.lower_tree(parse_go(go_parser, code)).functions[0]
        value = first_return(func).values[0]

        assert isinstance(value, Unary)
        assert value.op == "&"
        literal = unwrap_literal(value)
        assert literal.type_name == "pluginsdk.Resource"
        key_value = literal.elements[0]
        assert isinstance(key_value.key, Ident)
        assert key_value.key.name == "Create"
        assert callable_name(key_value.value) == "create"

    def test_short_var_and_assignment(self, go_parser):
        """Test :=, = and var spec all lower to Assign."""
        code = """package p
func f() {
    a, b := 1, "two"
    resp.TypeName = "x_foo"
    var c = []int{}
}
"""
        func = go_impl.lower_tree(parse_go(go_parser, code)).functions[0]
        assigns = [node for node in walk(func.body) if isinstance(node, Assign)]

        assert len(assigns) == 3

        short_var = assigns[0]
        assert short_var.define is True
        assert [t.name for t in short_var.targets] == ["a", "b"]
        assert isinstance(short_var.values[1], StringLit)

        field_assign = assigns[1]
        assert field_assign.define is False
        assert isinstance(field_assign.targets[0], Selector)
        assert field_assign.targets[0].field == "TypeName"
        assert field_assign.values[0].value == "x_foo"

        var_spec = assigns[2]
        assert var_spec.targets[0].name == "c"
        assert isinstance(var_spec.values[0], CompositeLit)

    def test_raw_string_is_unquoted(self, go_parser):
        """Test backquoted strings lose their quotes."""
        code = """package p
func (r R) ResourceType() string { return `x_raw` }
"""
        func = go_impl.lower_tree(parse_go(go_parser, code)).functions[0]

        assert first_return(func).values[0].value == "x_raw"

    def test_nested_statements_are_walked(self, go_parser):
        """Test walk reaches returns inside if and for bodies."""
        code = """package p
func f(ok bool) []string {
    if ok {
        for i := 0; i < 2; i++ {
            return []string{"inner"}
        }
    }
    return nil
}
"""
        func = go_impl.lower_tree(parse_go(go_parser, code)).functions[0]
        returns = [node for node in walk(func.body) if isinstance(node, Return)]

        assert len(returns) == 2
        assert unwrap_literal(returns[0].values[0]).elements[0].value == "inner"


class TestParseSource:
    """parse_go_source convenience entry point."""

    def test_accepts_text(self):
        """Test str input is encoded before parsing."""
        source = go_impl.parse_go_source("package p\nfunc A() {}\n")

        assert source.package == "p"
        assert [f.name for f in source.functions] == ["A"]

    def test_tolerates_syntax_errors(self):
        """Test malformed source still yields a SourceFile."""
        source = go_impl.parse_go_source("package p\nfunc A() { return \nfunc B() string { return \"b\" }\n")

        assert source.package == "p"
