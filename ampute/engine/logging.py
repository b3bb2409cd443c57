"""
ampute.engine.logging

Logging utilities for amputation runs.
"""

from pathlib import Path
from typing import Callable, Optional, Union


def create_logger(
    output_dir: Optional[Union[str, Path]] = None,
    verbose: bool = True,
) -> Callable[[dict], None]:
    """Create logging function for amputation records.

    Args:
        output_dir: Run output directory. If given, every record is appended
            to output_dir/logs/ampute.log.
        verbose: Print calibration and summary lines.

    Returns:
        Logging callback function that accepts a record dict.
    """
    log_file = Path(output_dir) / "logs" / "ampute.log" if output_dir is not None else None

    def log(record: dict):
        event = record.get("event")

        if verbose and event == "calibration":
            print(f"  Pattern {record['pattern']:3d} | "
                  f"{record['type']:<5} | "
                  f"rows: {record['rows']:6d} | "
                  f"target: {record['target']:.4f} | "
                  f"achieved: {record['achieved']:.4f} | "
                  f"offset: {record['offset']:+.4f} | "
                  f"iters: {record['n_iter']}")
        elif verbose and event == "summary":
            print(f"  {record['mechanism']} | "
                  f"{'rows' if record['by_cases'] else 'cells'} | "
                  f"requested: {record['prop']:.4f} | "
                  f"realized: {record['realized']:.4f} | "
                  f"amputed rows: {record['amputed_rows']} | "
                  f"amputed cells: {record['amputed_cells']}")

        if log_file is not None:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(log_file, "a") as f:
                f.write(f"{record}\n")

    return log
