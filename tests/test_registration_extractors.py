"""
Registration recognizer tests.

Each test parses a small Go file and runs one of the five recognizers over it.
"""

from tfindex.ast_extractors.go_impl import parse_go_source
from tfindex.ast_extractors.go_nodes import Assign, walk
from tfindex.extractors import registration
from tfindex.pipeline.structures import SourceUnit


def make_unit(code: str, path: str = "registration.go") -> SourceUnit:
    """Helper to build a SourceUnit from Go code."""
    tree = parse_go_source(code)
    return SourceUnit(path=path, tree=tree, functions=tree.functions)


class TestSupportedResources:
    """Legacy map-literal registrations."""

    def test_direct_return(self):
        """Test map returned directly from the method."""
        unit = make_unit("""package svc
func (r Registration) SupportedResources() map[string]*pluginsdk.Resource {
    return map[string]*pluginsdk.Resource{
        "azurerm_foo": resourceFoo(),
        "azurerm_bar": resourceBar(),
    }
}
""")

        result = registration.extract_supported_resources(unit)

        assert result == {"azurerm_foo": "resourceFoo", "azurerm_bar": "resourceBar"}

    def test_variable_return(self):
        """Test map assigned to a local and returned by name."""
        unit = make_unit("""package svc
func (r Registration) SupportedResources() map[string]*pluginsdk.Resource {
    resources := map[string]*pluginsdk.Resource{
        "azurerm_foo": resourceFoo(),
    }
    return resources
}
""")

        assert registration.extract_supported_resources(unit) == {"azurerm_foo": "resourceFoo"}

    def test_plain_function_declaration(self):
        """Test a receiver-less declaration is recognized too."""
        unit = make_unit("""package svc
func SupportedDataSources() map[string]*pluginsdk.Resource {
    return map[string]*pluginsdk.Resource{"azurerm_foo": dataSourceFoo()}
}
""")

        assert registration.extract_supported_data_sources(unit) == {"azurerm_foo": "dataSourceFoo"}

    def test_skips_non_call_and_qualified_values(self):
        """Test only unqualified call values are recorded."""
        unit = make_unit("""package svc
func (r Registration) SupportedResources() map[string]*pluginsdk.Resource {
    return map[string]*pluginsdk.Resource{
        "azurerm_plain": resourcePlain(),
        "azurerm_ref": resourceRef,
        "azurerm_pkg": other.ResourcePkg(),
    }
}
""")

        assert registration.extract_supported_resources(unit) == {"azurerm_plain": "resourcePlain"}

    def test_duplicate_key_keeps_last(self):
        """Test the later entry wins for a repeated key."""
        unit = make_unit("""package svc
func (r Registration) SupportedResources() map[string]*pluginsdk.Resource {
    return map[string]*pluginsdk.Resource{
        "azurerm_foo": resourceFooV1(),
        "azurerm_foo": resourceFooV2(),
    }
}
""")

        assert registration.extract_supported_resources(unit) == {"azurerm_foo": "resourceFooV2"}

    def test_empty_map(self):
        """Test an empty literal yields an empty mapping."""
        unit = make_unit("""package svc
func (r Registration) SupportedResources() map[string]*pluginsdk.Resource {
    return map[string]*pluginsdk.Resource{}
}
""")

        assert registration.extract_supported_resources(unit) == {}

    def test_missing_declaration(self):
        """Test a file without the declaration yields nothing."""
        unit = make_unit("package svc\nfunc Other() {}\n")

        assert registration.extract_supported_resources(unit) == {}
        assert registration.extract_supported_data_sources(unit) == {}


class TestStructLists:
    """Modern Resources / DataSources registrations."""

    def test_resources_direct_return(self):
        """Test order and duplicates are preserved."""
        unit = make_unit("""package svc
func (r Registration) Resources() []sdk.Resource {
    return []sdk.Resource{
        FooResource{},
        BarResource{},
        FooResource{},
    }
}
""")

        assert registration.extract_resources(unit) == ["FooResource", "BarResource", "FooResource"]

    def test_data_sources_variable_and_address_of(self):
        """Test &T{} elements and the variable-return form."""
        unit = make_unit("""package svc
func (r Registration) DataSources() []sdk.DataSource {
    dataSources := []sdk.DataSource{
        FooDataSource{},
        &BarDataSource{},
    }
    return dataSources
}
""")

        assert registration.extract_data_sources(unit) == ["FooDataSource", "BarDataSource"]

    def test_qualified_elements_are_skipped(self):
        """Test pkg.Type{} and call elements are not recorded."""
        unit = make_unit("""package svc
func (r Registration) Resources() []sdk.Resource {
    return []sdk.Resource{
        other.FooResource{},
        NewBarResource(),
        BazResource{},
    }
}
""")

        assert registration.extract_resources(unit) == ["BazResource"]

    def test_empty_list(self):
        """Test empty literal and nil return."""
        empty = make_unit("""package svc
func (r Registration) Resources() []sdk.Resource {
    return []sdk.Resource{}
}
""")
        nil = make_unit("""package svc
func (r Registration) DataSources() []sdk.DataSource {
    return nil
}
""")

        assert registration.extract_resources(empty) == []
        assert registration.extract_data_sources(nil) == []


class TestEphemeralResources:
    """Function-reference list registrations."""

    def test_function_references(self):
        """Test bare identifiers are recorded in order."""
        unit = make_unit("""package svc
func (r Registration) EphemeralResources() []func() ephemeral.EphemeralResource {
    return []func() ephemeral.EphemeralResource{
        NewFooEphemeralResource,
        NewBarEphemeralResource,
    }
}
""")

        result = registration.extract_ephemeral_resources(unit)

        assert result == ["NewFooEphemeralResource", "NewBarEphemeralResource"]

    def test_calls_are_not_references(self):
        """Test invoked constructors are skipped."""
        unit = make_unit("""package svc
func (r Registration) EphemeralResources() []func() ephemeral.EphemeralResource {
    return []func() ephemeral.EphemeralResource{
        NewFooEphemeralResource(),
        NewBarEphemeralResource,
    }
}
""")

        assert registration.extract_ephemeral_resources(unit) == ["NewBarEphemeralResource"]


class TestHelpers:
    """find_declarations and literal_type_of."""

    def test_find_declarations_in_source_order(self):
        """Test every matching declaration is returned, first receiver first."""
        unit = make_unit("""package svc
func (r Registration) Resources() []sdk.Resource { return nil }
func (r Other) Resources() []sdk.Resource { return nil }
""")

        funcs = registration.find_declarations(unit, "Resources")

        assert [f.receiver_type for f in funcs] == ["Registration", "Other"]
        assert registration.find_declarations(unit, "Missing") == []

    def test_literal_type_of(self):
        """Test type names behind T{} and &T{}."""
        unit = make_unit("""package svc
func f() {
    a := Foo{}
    b := &Bar{}
    c := pkg.Baz{}
}
""")

        assigns = [n for n in walk(unit.functions[0].body) if isinstance(n, Assign)]
        types = [registration.literal_type_of(a.values[0]) for a in assigns]

        assert types == ["Foo", "Bar", None]


class TestMultipleReceivers:
    """One registration name declared on several receivers in one file."""

    def test_struct_lists_merged(self):
        """Test Resources() on two receivers yields both lists in source order."""
        unit = make_unit("""package svc
func (r Registration) Resources() []sdk.Resource {
    return []sdk.Resource{FooResource{}}
}

func (r legacyRegistration) Resources() []sdk.Resource {
    return []sdk.Resource{BarResource{}}
}
""")

        assert registration.extract_resources(unit) == ["FooResource", "BarResource"]

    def test_tables_merged_last_wins(self):
        """Test SupportedResources() tables merge, later declarations winning on key clashes."""
        unit = make_unit("""package svc
func (r Registration) SupportedResources() map[string]*pluginsdk.Resource {
    return map[string]*pluginsdk.Resource{"azurerm_foo": resourceFoo(), "azurerm_shared": resourceOld()}
}

func (r legacyRegistration) SupportedResources() map[string]*pluginsdk.Resource {
    return map[string]*pluginsdk.Resource{"azurerm_bar": resourceBar(), "azurerm_shared": resourceNew()}
}
""")

        assert registration.extract_supported_resources(unit) == {
            "azurerm_foo": "resourceFoo",
            "azurerm_shared": "resourceNew",
            "azurerm_bar": "resourceBar",
        }

    def test_function_lists_merged(self):
        """Test EphemeralResources() on two receivers."""
        unit = make_unit("""package svc
func (r Registration) EphemeralResources() []func() ephemeral.EphemeralResource {
    return []func() ephemeral.EphemeralResource{NewFooEphemeralResource}
}

func (r Other) EphemeralResources() []func() ephemeral.EphemeralResource {
    return []func() ephemeral.EphemeralResource{NewBarEphemeralResource}
}
""")

        assert registration.extract_ephemeral_resources(unit) == [
            "NewFooEphemeralResource",
            "NewBarEphemeralResource",
        ]
