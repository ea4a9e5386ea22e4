"""CLI entrypoint for shrinking precomputed replicate arrays.

Usage:
    pyshrinkit-shrink REPLICATES OUTPUT [--per-parameter-noise] [--confirm-subject-axis]
"""

import argparse
import logging
import sys

import numpy as np

from pyshrinkit.core.shrinkage import shrinkage_estimate
from pyshrinkit.io.mat_interop import load_replicates, save_shrinkage
from pyshrinkit.types import FileFormat, ShrinkageOptions


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="Shrink subject-level estimates toward the group mean.",
    )
    parser.add_argument("replicates",
                        help=".mat or .npz file with X1, X2, Xodd, Xeven arrays.")
    parser.add_argument("output", help="Output .mat or .npz file.")
    parser.add_argument("--per-parameter-noise", action="store_true", default=False,
                        help="Estimate noise variance per parameter instead of "
                             "averaging it across parameters.")
    parser.add_argument("--confirm-subject-axis", action="store_true", default=False,
                        help="Treat the only axis of 1-D inputs as the subject axis.")
    parser.add_argument("--format", choices=[f.value for f in FileFormat],
                        default=FileFormat.AUTO.value,
                        help="Output file format (default: from extension).")

    args = parser.parse_args(argv)

    options = ShrinkageOptions(
        average_across_parameters=not args.per_parameter_noise,
        confirm_subject_axis=args.confirm_subject_axis,
    )

    try:
        replicates = load_replicates(args.replicates)
        result = shrinkage_estimate(*replicates.as_tuple(), options=options)
        save_shrinkage(args.output, result, fmt=FileFormat(args.format))
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Shrinkage complete: {replicates.num_subjects} subjects, "
          f"mean lambda {float(np.mean(result.lam)):.3f}. Output: {args.output}")


if __name__ == "__main__":
    main()
