from .storage import StoragePort

__all__ = ["StoragePort"]
