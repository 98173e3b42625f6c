"""
blueprint-compliance — orchestration

File: src/blueprint_compliance/orchestration/__init__.py

Purpose
- Run validators concurrently, merge their findings, and gate file writing.
"""

from blueprint_compliance.orchestration.engine import (
    ComplianceEngine,
    ComplianceRun,
    GateDecision,
    ValidatorOutcome,
    ValidatorStatus,
    configured_mode,
    evaluate_gate,
    merge_fragments,
)

__all__ = [
    "ComplianceEngine",
    "ComplianceRun",
    "GateDecision",
    "ValidatorOutcome",
    "ValidatorStatus",
    "configured_mode",
    "evaluate_gate",
    "merge_fragments",
]
