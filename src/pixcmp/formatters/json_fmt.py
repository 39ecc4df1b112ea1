"""JSON output for pixcmp CLI results."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, TextIO

from pixcmp.comparator import ComparisonResult


def result_record(
    test: Path, result: ComparisonResult, diff_image: Path | None = None
) -> dict[str, Any]:
    """Flatten one comparison into a JSON-serialisable dict."""
    return {
        "test": str(test),
        "identical": result.is_same,
        "diff_pixels": result.mismatched_pixels,
        "total_pixels": result.total_pixels,
        "diff_ratio": result.diff_ratio,
        "diff_image": str(diff_image) if diff_image else None,
    }


def write_json(data: Any, *, out: TextIO | None = None, indent: int = 2) -> None:
    """Write data as formatted JSON to the given output stream."""
    dest = out or sys.stdout
    dest.write(json.dumps(data, default=str, indent=indent) + "\n")
