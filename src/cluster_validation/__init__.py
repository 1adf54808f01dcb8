"""
cluster-validation: field-level validation of cluster task messages.

File: src/cluster_validation/__init__.py
Last updated: 2026-10-18

Purpose
- Package root. Defines package-level metadata and the import boundary.

What should be included in this file
- Version export and a minimal public API surface.
- Import boundary rules: submodules are imported explicitly by callers.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
