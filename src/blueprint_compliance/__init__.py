"""
blueprint-compliance

File: src/blueprint_compliance/__init__.py

Purpose
- Package root for the Blueprint compliance engine: structural contracts
  (Blueprints), strictness profiles, and the validators that check a project
  tree against them.

Functional requirements
- No side effects at import time (no config loading, no logging setup).
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
