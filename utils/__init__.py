"""
utils - Shared utilities for xyDoc.

Subpackages:
    utils.common   - Output-path helpers
    utils.parsers  - Hierarchical YAML configuration (GlobalConfig)
"""

__version__ = "1.0.0"
