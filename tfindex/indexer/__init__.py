"""tfindex Indexer Package.

Turns a provider's services directory into a ProviderIndex:
- GoPackageProvider parses one package directory into SourceUnits
- aggregate_package merges recognizer output for one package
- ProviderScanner fans packages out over a worker pool
"""
