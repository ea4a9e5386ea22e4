"""Read time series from text, .mat, NIfTI and CIFTI files."""

from pathlib import Path

import nibabel as nib
import numpy as np
import scipy.io as sio

from pyshrinkit.types import DataBundle


def read_timeseries(path: str | Path, variable: str = "timeseries") -> DataBundle:
    """Read a time series, dispatching on file extension.

    Supports:
      - .txt whitespace-delimited text (one row per timepoint)
      - .csv comma-delimited text without header
      - .mat files containing `variable`
      - .nii / .nii.gz NIfTI files
      - .dtseries.nii CIFTI files

    Returns a DataBundle with series shaped (num_timepoints, num_regions).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    name = path.name

    if name.endswith(".txt"):
        return _read_text(path, delimiter=None)
    elif name.endswith(".csv"):
        return _read_text(path, delimiter=",")
    elif name.endswith(".mat"):
        return _read_mat(path, variable)
    elif name.endswith(".dtseries.nii"):
        return _read_cifti(path)
    elif name.endswith(".nii.gz") or name.endswith(".nii"):
        return _read_nifti(path)
    else:
        raise ValueError(f"Unsupported file extension: {name}")


def _read_text(path: Path, delimiter: str | None) -> DataBundle:
    """Read a delimited text table."""
    data = np.loadtxt(str(path), delimiter=delimiter, dtype=np.float64, ndmin=2)
    return DataBundle(series=data)


def _read_mat(path: Path, variable: str) -> DataBundle:
    """Read a time series matrix from a .mat file."""
    raw = sio.loadmat(str(path))
    if variable not in raw:
        raise ValueError(f"Variable '{variable}' not found in {path}")
    data = np.asarray(raw[variable], dtype=np.float64)
    # MATLAB vectors load as (1, T) rows; a single region is a (T, 1) column
    if data.ndim < 2 or data.shape[0] == 1:
        data = data.reshape(-1, 1)
    return DataBundle(series=data)


def _read_nifti(path: Path) -> DataBundle:
    """Read NIfTI file and reshape to (num_timepoints, num_voxels)."""
    img = nib.load(str(path))
    data = np.asarray(img.dataobj, dtype=np.float64)
    if data.ndim < 4:
        raise ValueError(f"Expected a 4-D NIfTI time series, got shape {data.shape}")
    spatial = int(np.prod(data.shape[:3]))
    return DataBundle(series=data.reshape(spatial, -1).T)


def _read_cifti(path: Path) -> DataBundle:
    """Read CIFTI dtseries file (already time-first)."""
    img = nib.load(str(path))
    data = np.asarray(img.dataobj, dtype=np.float64)
    return DataBundle(series=data)
