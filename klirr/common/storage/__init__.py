"""Record storage for klirr data, email settings and the rate cache."""

from .backend import StorageBackend
from .yaml_store import YamlFileStore

__all__ = ['StorageBackend', 'YamlFileStore']
