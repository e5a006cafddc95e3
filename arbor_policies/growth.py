"""
Growth configuration for recursive tree generation.
"""

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, List

from .base import alias_fields


# Short names accepted from older configuration files
GROWTH_CONFIG_ALIASES = {
    "angle": "branch_angle_deg",
    "length": "base_length",
    "children": "child_count",
    "radius": "base_radius",
}


@dataclass(frozen=True)
class GrowthConfig:
    """
    Shape parameters for the recursive growth model.

    Read-only once constructed; shared by reference across the whole
    recursion.

    JSON Schema:
    {
        "levels": int (>= 0, max recursion depth),
        "branch_angle_deg": float (degrees),
        "base_length": float,
        "child_count": int (>= 0, branches per node),
        "base_radius": float,
        "randomness": float (0-1, scales all jitter),
        "seed": int | null
    }

    Notes
    -----
    ``branch_angle_deg`` is carried for callers and exported in reports;
    the crown shape itself comes from the height-dependent elevation bands
    in ``arborgen.ops.growth``.
    """
    levels: int = 2
    branch_angle_deg: float = 30.0
    base_length: float = 10.0
    child_count: int = 2
    base_radius: float = 1.0
    randomness: float = 1.0
    seed: Optional[int] = None

    def validate(self) -> List[str]:
        """Return a list of validation errors (empty if valid)."""
        errors = []
        if self.levels < 0:
            errors.append(f"levels must be >= 0, got {self.levels}")
        if self.child_count < 0:
            errors.append(f"child_count must be >= 0, got {self.child_count}")
        if self.base_length < 0:
            errors.append(f"base_length must be >= 0, got {self.base_length}")
        if self.base_radius < 0:
            errors.append(f"base_radius must be >= 0, got {self.base_radius}")
        if not 0.0 <= self.randomness <= 1.0:
            errors.append(f"randomness must be in [0, 1], got {self.randomness}")
        return errors

    def max_node_count(self) -> int:
        """Upper bound on nodes: sum of child_count**i for i in [0, levels]."""
        return sum(self.child_count ** i for i in range(self.levels + 1))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "GrowthConfig":
        d = alias_fields(d, GROWTH_CONFIG_ALIASES)
        return GrowthConfig(**{k: v for k, v in d.items() if k in GrowthConfig.__dataclass_fields__})


__all__ = [
    "GrowthConfig",
    "GROWTH_CONFIG_ALIASES",
]
