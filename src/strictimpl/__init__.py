"""strictimpl - strict interface implementation checking for TypeScript."""

__version__ = "0.1.0"
