"""
Mesh export helpers.

Only the generated geometry is written out; branch trees themselves are
not persisted.
"""

from pathlib import Path
from typing import Dict, Any, Union
import json
import logging

from arbor_policies import OperationReport
from ..core.mesh import MeshGroup

logger = logging.getLogger(__name__)

SCENE_FORMATS = {".glb", ".obj", ".ply", ".stl", ".off"}


def save_mesh_group(group: MeshGroup, path: Union[str, Path]) -> Path:
    """
    Export a mesh group, choosing the format from the file suffix.

    Formats that hold a single mesh (stl, ply, off) receive the
    concatenated geometry; glb and obj receive the full scene.

    Raises
    ------
    ValueError
        If the suffix is not a supported format or the group is empty
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SCENE_FORMATS:
        raise ValueError(f"Unsupported mesh format {suffix!r}; expected one of {sorted(SCENE_FORMATS)}")
    if len(group) == 0:
        raise ValueError("Cannot export an empty mesh group")

    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix in {".glb", ".obj"}:
        group.to_scene().export(str(path))
    else:
        group.concatenate().export(str(path))

    logger.info(f"Saved {len(group)} sub-meshes to {path}")
    return path


def write_report(report: Union[Dict[str, Any], OperationReport], path: Union[str, Path]) -> Path:
    """Write a report (or plain dict) as indented JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = report.to_dict() if isinstance(report, OperationReport) else report
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=str)

    logger.info(f"Wrote report to {path}")
    return path


__all__ = [
    "save_mesh_group",
    "write_report",
]
