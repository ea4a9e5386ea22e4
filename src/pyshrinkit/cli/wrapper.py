"""CLI entrypoint for the shrinkage pipeline.

Usage:
    pyshrinkit-wrapper SUB_LIST OUTPUT_DIR [--visit-start N --visit-stop N]
                       [--retest-start N --retest-stop N]
"""

import argparse
import logging
import sys

import numpy as np

from pyshrinkit.pipeline.wrapper import run_wrapper
from pyshrinkit.types import FileFormat


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="Estimate shrinkage connectivity from subject time series.",
    )
    parser.add_argument("sub_list",
                        help="CSV file with subject_id, timeseries[, retest] columns.")
    parser.add_argument("output_dir", help="Output directory.")
    parser.add_argument("--visit-start", type=int, default=None,
                        help="First timepoint (0-based) of the visit to use.")
    parser.add_argument("--visit-stop", type=int, default=None,
                        help="Timepoint after the last one of the visit to use.")
    parser.add_argument("--retest-start", type=int, default=None,
                        help="First timepoint of the retest visit. Without a "
                             "retest column, the retest is read from the same file.")
    parser.add_argument("--retest-stop", type=int, default=None,
                        help="Timepoint after the last one of the retest visit.")
    parser.add_argument("--no-fisher", action="store_true", default=False,
                        help="Use raw correlations instead of Fisher Z values.")
    parser.add_argument("--full-matrix", action="store_true", default=False,
                        help="Shrink the full connectivity matrix instead of "
                             "its upper triangle.")
    parser.add_argument("--per-parameter-noise", action="store_true", default=False,
                        help="Estimate noise variance per parameter.")
    parser.add_argument("--format", choices=["mat_v5", "mat_v73", "npz"],
                        default="mat_v5", help="Output file format (default: mat_v5).")
    parser.add_argument("--save-replicates", action="store_true", default=False,
                        help="Also save the X1, X2, Xodd, Xeven arrays.")

    args = parser.parse_args(argv)

    try:
        result = run_wrapper(
            sub_list=args.sub_list,
            output_dir=args.output_dir,
            visit_start=args.visit_start,
            visit_stop=args.visit_stop,
            retest_start=args.retest_start,
            retest_stop=args.retest_stop,
            upper=not args.full_matrix,
            fisher=not args.no_fisher,
            average_across_parameters=not args.per_parameter_noise,
            fmt=FileFormat(args.format),
            save_replicate_arrays=args.save_replicates,
        )
        print(f"Wrapper complete. Mean lambda {float(np.mean(result.lam)):.3f}. "
              f"Output: {args.output_dir}")
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
