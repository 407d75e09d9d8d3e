"""devinit -- multi-language project scaffolding from template bundles."""

__version__ = "0.1.0"
