"""Load and save replicate arrays and shrinkage results.

Handles MATLAB v5, MATLAB v7.3 (HDF5) and .npz files.
"""

from pathlib import Path

import h5py
import numpy as np
import scipy.io as sio

from pyshrinkit.math.transforms import from_upper_triangle
from pyshrinkit.types import FileFormat, ReplicateSet, ShrinkageResult

REPLICATE_KEYS = ("X1", "X2", "Xodd", "Xeven")
_MAP_KEYS = ("lambda", "varW", "var_within", "varX", "varTOT")


def _is_hdf5(path: Path) -> bool:
    """Check if a file is HDF5 format by reading its magic bytes."""
    with open(path, "rb") as f:
        return f.read(8) == b"\x89HDF\r\n\x1a\n"


def load_mat(path: str | Path) -> dict[str, np.ndarray]:
    """Load data from a .mat or .npz file, auto-detecting format."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if path.suffix == ".npz":
        with np.load(str(path)) as npz:
            return dict(npz)

    if _is_hdf5(path):
        result = {}
        with h5py.File(str(path), "r") as f:
            for key in f.keys():
                if key.startswith("#"):
                    continue
                # MATLAB stores v7.3 arrays column-major
                result[key] = np.array(f[key]).T
        return result

    raw = sio.loadmat(str(path))
    return {k: v for k, v in raw.items() if not k.startswith("_")}


def save_mat(
    path: str | Path,
    data: dict[str, np.ndarray],
    fmt: FileFormat = FileFormat.MAT_V5,
) -> None:
    """Save data to a .mat or .npz file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == FileFormat.AUTO:
        if path.suffix == ".npz":
            fmt = FileFormat.NPZ
        elif path.suffix == ".mat":
            fmt = FileFormat.MAT_V5
        else:
            raise ValueError(f"Cannot auto-detect format for extension: {path.suffix}")

    if fmt == FileFormat.MAT_V5:
        sio.savemat(str(path), data)
    elif fmt == FileFormat.MAT_V73:
        with h5py.File(str(path), "w") as f:
            for key, val in data.items():
                f.create_dataset(key, data=np.asarray(val).T)
    elif fmt == FileFormat.NPZ:
        np.savez(str(path), **data)
    else:
        raise ValueError(f"Unsupported format: {fmt}")


def load_replicates(path: str | Path) -> ReplicateSet:
    """Load X1, X2, Xodd and Xeven from a .mat or .npz file.

    Singleton dimensions that MATLAB adds to vectors are kept as saved;
    squeeze beforehand if the file holds 1-D data.
    """
    data = load_mat(path)
    missing = [k for k in REPLICATE_KEYS if k not in data]
    if missing:
        raise ValueError(f"Missing variables in {path}: {', '.join(missing)}")
    return ReplicateSet(
        x1=np.asarray(data["X1"]),
        x2=np.asarray(data["X2"]),
        x_odd=np.asarray(data["Xodd"]),
        x_even=np.asarray(data["Xeven"]),
    )


def save_replicates(
    path: str | Path,
    replicates: ReplicateSet,
    fmt: FileFormat = FileFormat.AUTO,
) -> None:
    """Save a ReplicateSet under the variable names load_replicates expects."""
    save_mat(path, dict(zip(REPLICATE_KEYS, replicates.as_tuple())), fmt=fmt)


def save_shrinkage(
    path: str | Path,
    result: ShrinkageResult,
    fmt: FileFormat = FileFormat.AUTO,
    square_maps: bool = False,
) -> None:
    """Save shrinkage estimates and variance components.

    With square_maps, the per-parameter maps of an upper-triangle vector are
    also saved as symmetric matrices (`<name>_mat`, zero diagonal).
    """
    c = result.components
    save_dict = {
        "X_shrink": result.x_shrink,
        "X_bar": result.x_bar,
        "lambda": c.lam,
        "varU": np.asarray(c.var_u),
        "varW": c.var_w,
        "var_within": c.var_within,
        "varX": c.var_x,
        "varTOT": c.var_tot,
    }
    if square_maps:
        if c.lam.ndim != 1:
            raise ValueError(
                f"Square maps need upper-triangle vectors, got shape {c.lam.shape}")
        for key in _MAP_KEYS:
            save_dict[f"{key}_mat"] = from_upper_triangle(save_dict[key])
        if np.ndim(c.var_u) == 1:
            save_dict["varU_mat"] = from_upper_triangle(c.var_u)
    save_mat(path, save_dict, fmt=fmt)
