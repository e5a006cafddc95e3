"""
Backend interfaces for mesh construction and isosurface extraction.

Backend Registration Pattern:
- The headless "null" backends are always registered
- Library-backed backends register only if their dependency imports
- A registered name whose import failed resolves to None, and the import
  error is available via get_backend_load_error(); callers treat None as
  "backend missing" and skip the affected stage
"""

from typing import Dict, List, Optional, Type

from .base import GeometryBackend, IsosurfaceBackend
from .null_backend import NullGeometryBackend, NullIsosurfaceBackend

_GEOMETRY_REGISTRY: Dict[str, Optional[Type[GeometryBackend]]] = {
    "null": NullGeometryBackend,
}

_ISOSURFACE_REGISTRY: Dict[str, Optional[Type[IsosurfaceBackend]]] = {
    "null": NullIsosurfaceBackend,
}

_BACKEND_LOAD_ERRORS: Dict[str, str] = {}

try:
    from .trimesh_backend import TrimeshGeometryBackend
    _GEOMETRY_REGISTRY["trimesh"] = TrimeshGeometryBackend
except ImportError as e:
    _BACKEND_LOAD_ERRORS["trimesh"] = f"Import failed: {e}"
    _GEOMETRY_REGISTRY["trimesh"] = None
    TrimeshGeometryBackend = None

try:
    from .marching_cubes_backend import MarchingCubesBackend
    _ISOSURFACE_REGISTRY["skimage"] = MarchingCubesBackend
except ImportError as e:
    _BACKEND_LOAD_ERRORS["skimage"] = f"Import failed: {e}"
    _ISOSURFACE_REGISTRY["skimage"] = None
    MarchingCubesBackend = None


def get_available_backends() -> Dict[str, List[str]]:
    """
    Get names of backends that loaded successfully.

    Returns
    -------
    Dict[str, List[str]]
        {"geometry": [...], "isosurface": [...]}
    """
    return {
        "geometry": [k for k, v in _GEOMETRY_REGISTRY.items() if v is not None],
        "isosurface": [k for k, v in _ISOSURFACE_REGISTRY.items() if v is not None],
    }


def get_geometry_backend(name: str, **kwargs) -> Optional[GeometryBackend]:
    """
    Instantiate a geometry backend by name.

    Parameters
    ----------
    name : str
        Backend name ("trimesh", "null")
    **kwargs
        Passed to the backend constructor

    Returns
    -------
    GeometryBackend or None
        Backend instance, or None if its dependency failed to import

    Raises
    ------
    KeyError
        If the name was never registered
    """
    if name not in _GEOMETRY_REGISTRY:
        raise KeyError(f"Unknown geometry backend: {name!r}")
    backend_class = _GEOMETRY_REGISTRY[name]
    if backend_class is None:
        return None
    return backend_class(**kwargs)


def get_isosurface_backend(name: str, **kwargs) -> Optional[IsosurfaceBackend]:
    """
    Instantiate an isosurface backend by name.

    Parameters
    ----------
    name : str
        Backend name ("skimage", "null")
    **kwargs
        Passed to the backend constructor

    Returns
    -------
    IsosurfaceBackend or None
        Backend instance, or None if its dependency failed to import

    Raises
    ------
    KeyError
        If the name was never registered
    """
    if name not in _ISOSURFACE_REGISTRY:
        raise KeyError(f"Unknown isosurface backend: {name!r}")
    backend_class = _ISOSURFACE_REGISTRY[name]
    if backend_class is None:
        return None
    return backend_class(**kwargs)


def get_backend_load_error(name: str) -> Optional[str]:
    """
    Get the error message if a backend failed to load.

    Returns
    -------
    str or None
        Error message if backend failed to load, None if loaded successfully
    """
    return _BACKEND_LOAD_ERRORS.get(name)


__all__ = [
    "GeometryBackend",
    "IsosurfaceBackend",
    "NullGeometryBackend",
    "NullIsosurfaceBackend",
    "TrimeshGeometryBackend",
    "MarchingCubesBackend",
    "get_available_backends",
    "get_geometry_backend",
    "get_isosurface_backend",
    "get_backend_load_error",
]
