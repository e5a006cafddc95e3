"""
Recursive growth of a branch tree.

Each node spawns ``child_count`` children whose length, radius and
elevation depend on how high in the crown the parent sits. Children are
spread around the parent axis at golden-angle increments and pulled
toward vertical by an upward tropism bias.
"""

from typing import Optional, Tuple
import logging

import numpy as np

from arbor_policies import GrowthConfig, coerce_vec3
from ..core.branch import BranchNode, count_nodes

logger = logging.getLogger(__name__)

GOLDEN_ANGLE = np.pi * (3.0 - np.sqrt(5.0))  # ~137.5 degrees
WORLD_UP = np.array([0.0, 1.0, 0.0])

LENGTH_TAPER = 0.2
RADIUS_TAPER = 0.3

# Height fraction limits and elevation bands in degrees from the parent axis
LOWER_CROWN_LIMIT = 0.3
UPPER_CROWN_LIMIT = 0.7
LOWER_CROWN_ELEVATION_DEG = (110.0, 140.0)
MID_CROWN_ELEVATION_DEG = (70.0, 110.0)
UPPER_CROWN_ELEVATION_DEG = (40.0, 80.0)

AZIMUTH_JITTER = 0.2
TROPISM_BASE = 0.15
TROPISM_JITTER = 0.1
UPPER_TROPISM_BASE = 0.2
UPPER_TROPISM_JITTER = 0.2
DIRECTION_JITTER = 0.1


def height_fraction(level: int, levels: int) -> float:
    """Relative height of a level in the crown: 0 at the trunk, 1 at the top."""
    return level / max(1, levels - 1)


def elevation_range(height_frac: float) -> Tuple[float, float]:
    """
    Elevation band (radians from the parent axis) for a height fraction.

    Low branches droop outward, canopy branches point upward.
    """
    if height_frac < LOWER_CROWN_LIMIT:
        lo, hi = LOWER_CROWN_ELEVATION_DEG
    elif height_frac > UPPER_CROWN_LIMIT:
        lo, hi = UPPER_CROWN_ELEVATION_DEG
    else:
        lo, hi = MID_CROWN_ELEVATION_DEG
    return np.radians(lo), np.radians(hi)


def _rotate_vector(
    v: np.ndarray,
    axis: np.ndarray,
    angle: float,
) -> np.ndarray:
    """Rotate vector v around axis by angle (Rodrigues' formula)."""
    c = np.cos(angle)
    s = np.sin(angle)
    return v * c + np.cross(axis, v) * s + axis * np.dot(axis, v) * (1 - c)


def spherical_direction(parent_dir: np.ndarray, theta: float, phi: float) -> np.ndarray:
    """
    Unit direction at azimuth ``theta`` and elevation ``phi`` about ``parent_dir``.

    For a parent pointing along +Y this is the plain spherical mapping
    (theta=0 toward +X, theta=pi/2 toward +Z, phi=0 along the parent).
    Other parents use the minimal rotation taking +Y onto them.
    """
    local = np.array([
        np.sin(phi) * np.cos(theta),
        np.cos(phi),
        np.sin(phi) * np.sin(theta),
    ])

    axis_dir = np.asarray(parent_dir, dtype=float)
    norm = np.linalg.norm(axis_dir)
    if norm < 1e-12:
        return local / np.linalg.norm(local)
    axis_dir = axis_dir / norm

    cos_a = float(np.clip(np.dot(WORLD_UP, axis_dir), -1.0, 1.0))
    rot_axis = np.cross(WORLD_UP, axis_dir)
    rot_norm = np.linalg.norm(rot_axis)
    if rot_norm > 1e-10:
        result = _rotate_vector(local, rot_axis / rot_norm, np.arccos(cos_a))
    elif cos_a < 0:
        # Antiparallel: half turn about X
        result = _rotate_vector(local, np.array([1.0, 0.0, 0.0]), np.pi)
    else:
        result = local

    return result / np.linalg.norm(result)


def grow_branches(
    config: GrowthConfig,
    root: BranchNode,
    level: int = 0,
    randomness: float = 1.0,
    rng: Optional[np.random.Generator] = None,
) -> None:
    """
    Recursively grow children under ``root``.

    Appends to ``root.children`` in place and recurses into each new child
    until ``config.levels`` is reached.

    Parameters
    ----------
    config : GrowthConfig
        Shape parameters
    root : BranchNode
        Node to grow from; its direction must already be resolved
    level : int
        Recursion depth of ``root``
    randomness : float
        Scales every random jitter; 0 gives the most regular structure
    rng : np.random.Generator, optional
        Random source; a fresh unseeded generator is used if omitted
    """
    if level >= config.levels:
        return
    if rng is None:
        rng = np.random.default_rng()

    height_frac = height_fraction(level, config.levels)
    length = config.base_length * (1.0 - LENGTH_TAPER * height_frac)
    radius = config.base_radius * (1.0 - RADIUS_TAPER * height_frac)
    phi_min, phi_max = elevation_range(height_frac)

    for i in range(config.child_count):
        phi = phi_min + (phi_max - phi_min) * rng.random() * randomness
        theta = i * GOLDEN_ANGLE + (rng.random() - 0.5) * AZIMUTH_JITTER * randomness

        direction = spherical_direction(root.direction, theta, phi)

        # Upward tropism, stronger in the canopy
        upward_bias = TROPISM_BASE + TROPISM_JITTER * rng.random() * randomness
        if height_frac > UPPER_CROWN_LIMIT:
            upward_bias += (UPPER_TROPISM_BASE + UPPER_TROPISM_JITTER * rng.random()) * randomness
        direction = direction + WORLD_UP * upward_bias

        jitter = (rng.random(3) - 0.5) * DIRECTION_JITTER * randomness
        direction = direction + jitter

        norm = np.linalg.norm(direction)
        direction = direction / (norm if norm > 1e-12 else 1.0)

        child = BranchNode(
            origin=root.distal_end,
            direction=direction,
            length=length,
            radius=radius,
            level=level + 1,
        )
        root.children.append(child)
        grow_branches(config, child, level + 1, randomness, rng)


def generate_tree(
    config: GrowthConfig,
    origin=(0.0, 0.0, 0.0),
    direction=(0.0, 1.0, 0.0),
    rng: Optional[np.random.Generator] = None,
    randomness: Optional[float] = None,
) -> BranchNode:
    """
    Build a root branch and grow a full tree from it.

    Parameters
    ----------
    config : GrowthConfig
        Shape parameters
    origin : array-like or dict
        Base of the trunk; dicts with x, y, z keys are accepted
    direction : array-like or dict
        Trunk direction (normalized here)
    rng : np.random.Generator, optional
        Random source; defaults to one seeded from ``config.seed``
    randomness : float, optional
        Overrides ``config.randomness``

    Returns
    -------
    BranchNode
        The root of the generated tree

    Raises
    ------
    ValueError
        If the config fails validation or the direction is zero
    """
    errors = config.validate()
    if errors:
        raise ValueError(f"Invalid growth config: {'; '.join(errors)}")

    origin = np.array(coerce_vec3(origin))
    direction = np.array(coerce_vec3(direction))
    norm = np.linalg.norm(direction)
    if norm < 1e-12:
        raise ValueError("Trunk direction must be non-zero")

    if rng is None:
        rng = np.random.default_rng(config.seed)
    if randomness is None:
        randomness = config.randomness

    root = BranchNode(
        origin=origin,
        direction=direction / norm,
        length=config.base_length,
        radius=config.base_radius,
        level=0,
    )
    grow_branches(config, root, 0, randomness, rng)

    logger.debug(f"Grew tree with {count_nodes(root)} nodes over {config.levels} levels")
    return root


__all__ = [
    "GOLDEN_ANGLE",
    "WORLD_UP",
    "height_fraction",
    "elevation_range",
    "spherical_direction",
    "grow_branches",
    "generate_tree",
]
