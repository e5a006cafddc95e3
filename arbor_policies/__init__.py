"""
Arbor Policies - Centralized policy definitions for arborgen.

This package provides the configuration dataclasses used by the growth and
meshing stages. All policies are JSON-serializable and support the
"requested vs effective" pattern through OperationReport.

Usage:
    from arbor_policies import GrowthConfig, TreeMeshPolicy, OperationReport
    from arbor_policies.mesh import TubeMeshPolicy
"""

from .base import (
    OperationReport,
    validate_policy,
    coerce_vec3,
    alias_fields,
)

from .growth import (
    GrowthConfig,
    GROWTH_CONFIG_ALIASES,
)

from .mesh import (
    TubeMeshPolicy,
    JunctionBlendPolicy,
    FoliagePolicy,
    TreeMeshPolicy,
)

__all__ = [
    "OperationReport",
    "validate_policy",
    "coerce_vec3",
    "alias_fields",
    "GrowthConfig",
    "GROWTH_CONFIG_ALIASES",
    "TubeMeshPolicy",
    "JunctionBlendPolicy",
    "FoliagePolicy",
    "TreeMeshPolicy",
]
