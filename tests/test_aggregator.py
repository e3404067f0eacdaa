"""
Package aggregation tests against the fixture provider.
"""

from tfindex.ast_extractors.go_impl import parse_go_source
from tfindex.indexer.aggregator import aggregate_package
from tfindex.indexer.provider import GoPackageProvider
from tfindex.pipeline.structures import CRUDMethods, DataSourceMethods, SourceUnit

NETWORK_PATH = "github.com/example/terraform-provider-fixture/internal/services/network"


def make_unit(code: str, path: str) -> SourceUnit:
    """Helper to build a SourceUnit from Go code."""
    tree = parse_go_source(code)
    return SourceUnit(path=path, tree=tree, functions=tree.functions)


class TestFixturePackages:
    """Aggregation of the fixture service packages."""

    def test_network_package(self, services_dir):
        """Test every field of the network registration."""
        units = GoPackageProvider().load_package(services_dir / "network")

        reg = aggregate_package(units, "network", NETWORK_PATH)

        assert reg.service_name == "network"
        assert reg.package_path == NETWORK_PATH
        assert reg.supported_resources == {
            "azurerm_virtual_network": "resourceVirtualNetwork",
            "azurerm_subnet": "resourceSubnet",
            "azurerm_route_table": "resourceRouteTable",
        }
        assert reg.supported_data_sources == {
            "azurerm_virtual_network": "dataSourceVirtualNetwork",
            "azurerm_subnet": "dataSourceSubnet",
        }
        assert reg.resources == ["NetworkManagerResource", "NetworkProfileResource", "UnnamedNetworkResource"]
        assert reg.data_sources == []
        assert reg.ephemeral_resources == []

        assert reg.resource_terraform_types == {
            "NetworkManagerResource": "azurerm_network_manager",
            "NetworkProfileResource": "azurerm_network_profile",
        }

        assert reg.resource_crud_methods == {
            "azurerm_virtual_network": CRUDMethods(
                create_method="resourceVirtualNetworkCreate",
                read_method="resourceVirtualNetworkRead",
                update_method="resourceVirtualNetworkUpdate",
                delete_method="resourceVirtualNetworkDelete",
            ),
            "azurerm_subnet": CRUDMethods(create_method="Create", read_method="Read", delete_method="Delete"),
            "azurerm_route_table": CRUDMethods(
                create_method="resourceRouteTableCreate",
                read_method="resourceRouteTableRead",
            ),
        }
        assert reg.data_source_methods == {
            "azurerm_virtual_network": DataSourceMethods(read_method="dataSourceVirtualNetworkRead"),
        }

    def test_secrets_package(self, services_dir):
        """Test variable-return shapes, ephemeral resources and skipped CRUD."""
        units = GoPackageProvider().load_package(services_dir / "secrets")

        reg = aggregate_package(units, "secrets", "example/secrets")

        assert reg.supported_resources == {
            "azurerm_key_vault": "resourceKeyVault",
            "azurerm_key_vault_secret": "resourceKeyVaultSecret",
        }
        assert list(reg.resource_crud_methods) == ["azurerm_key_vault"]
        assert reg.resource_crud_methods["azurerm_key_vault"].update_method == "resourceKeyVaultUpdate"

        assert reg.data_sources == ["KeyVaultSecretsDataSource", "KeyVaultEncryptedValueDataSource"]
        assert reg.data_source_terraform_types == {
            "KeyVaultSecretsDataSource": "azurerm_key_vault_secrets",
            "KeyVaultEncryptedValueDataSource": "azurerm_key_vault_encrypted_value",
        }

        assert reg.ephemeral_resources == [
            "NewKeyVaultSecretEphemeralResource",
            "NewKeyVaultCertificateEphemeralResource",
        ]
        assert reg.ephemeral_terraform_types == {"NewKeyVaultSecretEphemeralResource": "azurerm_key_vault_secret"}

    def test_package_without_registrations(self, services_dir):
        """Test a package with Go files but no registrations is empty."""
        units = GoPackageProvider().load_package(services_dir / "docs")

        reg = aggregate_package(units, "docs", "example/docs")

        assert reg.is_empty()
        assert reg.resource_terraform_types == {}


class TestMerge:
    """Cross-file merge rules."""

    def test_tables_last_write_wins_and_lists_concatenate(self):
        """Test later files overwrite table keys and extend lists."""
        first = make_unit("""package svc
func (r Registration) SupportedResources() map[string]*pluginsdk.Resource {
    return map[string]*pluginsdk.Resource{"azurerm_foo": resourceFooOld(), "azurerm_bar": resourceBar()}
}
func (r Registration) Resources() []sdk.Resource {
    return []sdk.Resource{AResource{}}
}
""", "a.go")
        second = make_unit("""package svc
func (r Other) SupportedResources() map[string]*pluginsdk.Resource {
    return map[string]*pluginsdk.Resource{"azurerm_foo": resourceFooNew()}
}
func (r Other) Resources() []sdk.Resource {
    return []sdk.Resource{BResource{}, AResource{}}
}
""", "b.go")

        reg = aggregate_package([first, second], "svc", "example/svc")

        assert reg.supported_resources == {"azurerm_foo": "resourceFooNew", "azurerm_bar": "resourceBar"}
        assert reg.resources == ["AResource", "BResource", "AResource"]

    def test_no_units(self):
        """Test an empty file list yields an empty registration."""
        reg = aggregate_package([], "svc", "example/svc")

        assert reg.is_empty()
        assert reg.to_dict()["supported_resources"] == {}
