"""CustomResourceDefinition generation and registration."""
from .manager import CRDManager, merge_crd_versions
from .schema import build_crd, model_schema

__all__ = ["CRDManager", "merge_crd_versions", "build_crd", "model_schema"]
