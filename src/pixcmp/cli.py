"""pixcmp command -- compare test images against one baseline."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import click

from pixcmp import __version__
from pixcmp.compare import BoundComparator, pixel_compare
from pixcmp.comparator import Color, ComparisonResult, parse_color
from pixcmp.errors import InvalidColor, PixelCompareError
from pixcmp.formatters.json_fmt import result_record, write_json

log = logging.getLogger(__name__)


def _color_option(ctx: click.Context, param: click.Parameter, value: str) -> Color:
    """Parse an R,G,B,A option value."""
    try:
        return parse_color(value)
    except InvalidColor as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def _diff_path(test: Path, output: Path | None, output_dir: Path | None) -> Path | None:
    if output is not None:
        return output
    if output_dir is not None:
        return output_dir / f"{test.stem}.diff.png"
    return None


def _duplicate_diff_name(tests: tuple[Path, ...]) -> str | None:
    """Return the first diff file name shared by two TEST paths, if any."""
    seen: set[str] = set()
    for test in tests:
        name = f"{test.stem}.diff.png"
        if name in seen:
            return name
        seen.add(name)
    return None


def _render_text(test: Path, result: ComparisonResult, diff_image: Path | None) -> None:
    if result.is_same:
        click.echo(f"match {test}")
    else:
        click.echo(
            f"diff {test}: {result.mismatched_pixels}/{result.total_pixels} pixels "
            f"({result.diff_ratio:.2f}%)"
        )
    if diff_image is not None:
        click.echo(f"  diff image: {diff_image}")


@click.command("pixcmp", context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="pixcmp")
@click.argument("base", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument(
    "tests", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "-o",
    "--output",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the diff image here (.png, .jpg, .jpeg). Single TEST only.",
)
@click.option(
    "--output-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Write <test>.diff.png for every TEST into this directory.",
)
@click.option(
    "--base-color",
    default="255,0,0,255",
    envvar="PIXCMP_BASE_COLOR",
    show_default=True,
    callback=_color_option,
    help="R,G,B,A highlight for pixels only in BASE.",
)
@click.option(
    "--test-color",
    default="0,255,0,255",
    envvar="PIXCMP_TEST_COLOR",
    show_default=True,
    callback=_color_option,
    help="R,G,B,A highlight for pixels only in TEST.",
)
@click.option("--json", "use_json", is_flag=True, help="JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging on stderr.")
def main(
    base: Path,
    tests: tuple[Path, ...],
    output: Path | None,
    output_dir: Path | None,
    base_color: Color,
    test_color: Color,
    use_json: bool,
    verbose: bool,
) -> None:
    """Compare TEST images pixel-by-pixel against BASE.

    BASE is decoded once and reused for every TEST.
    Exit 0 if all images match, 1 if any differs, 2 on error.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    if output is not None and output_dir is not None:
        click.echo("error: --output and --output-dir are mutually exclusive", err=True)
        sys.exit(2)
    if output is not None and len(tests) > 1:
        click.echo("error: --output needs a single TEST; use --output-dir", err=True)
        sys.exit(2)
    if output_dir is not None:
        clash = _duplicate_diff_name(tests)
        if clash is not None:
            click.echo(f"error: --output-dir would write {clash} more than once", err=True)
            sys.exit(2)

    records: list[dict[str, Any]] = []
    all_same = True
    try:
        if output_dir is not None:
            output_dir.mkdir(parents=True, exist_ok=True)
        check = pixel_compare(base, base_color=base_color, test_color=test_color)
        assert isinstance(check, BoundComparator)
        for test in tests:
            diff_image = _diff_path(test, output, output_dir)
            result = check(test_image=test, output_image=diff_image)
            assert isinstance(result, ComparisonResult)
            log.debug("%s vs %s: same=%s", base, test, result.is_same)
            all_same = all_same and result.is_same
            if use_json:
                records.append(result_record(test, result, diff_image))
            else:
                _render_text(test, result, diff_image)
    except (PixelCompareError, OSError) as exc:
        click.echo(f"error: {exc}", err=True)
        sys.exit(2)

    if use_json:
        write_json(records[0] if len(records) == 1 else records)
    sys.exit(0 if all_same else 1)


if __name__ == "__main__":
    main()
