from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.dimension_index import TableConfig
from .core.errors import TableError
from .core.formatter import CellFormatter
from .core.reader import JsonStatReader
from .render.base import render_table
from .render.excel import ExcelStyler, ExcelTable
from .render.html import HtmlTable
from .vis.figure import FigureTable

FORMATS = ("html", "xlsx", "png")


def render_file(input_path: str | Path,
                fmt: str = "html",
                out_dir: Optional[str | Path] = None,
                config: Optional[TableConfig] = None) -> str:
    """
    Reads a json-stat file, renders it as html, xlsx or png and writes the result
    next to the input (or into out_dir). Returns the output path.
    """
    if fmt not in FORMATS:
        raise ValueError(f"unknown output format '{fmt}', expected one of {', '.join(FORMATS)}")
    input_path = Path(input_path)
    out_dir = Path(out_dir) if out_dir is not None else input_path.parent
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{input_path.stem}.{fmt}"

    reader = JsonStatReader.from_file(input_path)
    formatter = CellFormatter(reader)
    if fmt == "html":
        html = render_table(reader, HtmlTable(formatter), config)
        out_path.write_text(html, encoding="utf-8")
    elif fmt == "xlsx":
        content = render_table(reader, ExcelTable(formatter, styler=ExcelStyler()), config)
        out_path.write_bytes(content)
    else:
        render_table(reader, FigureTable(out_path, formatter), config)
    return str(out_path)


def run_cli(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Render a json-stat dataset as a table (html, xlsx or png)")
    p.add_argument("--input", required=True, help="Path to a json-stat dataset (.json)")
    p.add_argument("--format", choices=FORMATS, default="html", help="Output format")
    p.add_argument("--out", default=None, help="Output directory (default: next to the input)")
    p.add_argument("--split-point", type=int, default=None,
                   help="Number of dimensions used for rows (default: all but the last two)")
    p.add_argument("--exclude-one-dim", action="store_true",
                   help="Drop leading dimensions of size one")
    p.add_argument("--no-label-last-dim", action="store_true",
                   help="Do not render the label row of the last dimension")
    p.add_argument("--no-row-spans", action="store_true",
                   help="Repeat label cells instead of using rowspans")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    config = TableConfig(split_point=args.split_point,
                         exclude_one_dim=args.exclude_one_dim,
                         no_label_last_dim=args.no_label_last_dim,
                         use_row_spans=not args.no_row_spans)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Input file not found: {input_path}", file=sys.stderr)
        return 1
    try:
        out_path = render_file(input_path, args.format, args.out, config)
    except TableError as e:
        print(f"Failed to render '{input_path}': {e}", file=sys.stderr)
        return 2
    print(f"Successfully rendered table: {Path(out_path).resolve()}")
    return 0


def main():
    sys.exit(run_cli())


if __name__ == '__main__':
    main()
