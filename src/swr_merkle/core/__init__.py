from .settings import MerkleSettings, RuntimeSettings, SWRSettings, get_settings

__all__ = ["MerkleSettings", "RuntimeSettings", "SWRSettings", "get_settings"]
