from .settings import BulkSigSettings, get_settings

__all__ = ["BulkSigSettings", "get_settings"]
