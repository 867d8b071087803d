"""
lofi: CLI for parsing Lofi documents.

Usage:
  lofi parse [OPTIONS] SRC...
  lofi element LINE
  lofi count [OPTIONS] SRC

Examples:
  lofi parse form.lofi
  lofi parse pages/*.lofi --out pages.jsonl -v
  lofi element "Sign in #button #variation: primary"
  lofi count pages/home.lofi --out home-counts.csv
"""

import logging
from pathlib import Path

import orjson
import typer
from tqdm import tqdm

from lofi.io.export import (
    count_keys,
    document_to_list,
    element_to_dict,
    export_count,
    export_jsonl,
)
from lofi.parser import parse_element, parse_sections
from lofi.schemas import SourceRecord

app = typer.Typer(help=__doc__, no_args_is_help=True)


def setup_logging(verbose: int):
    """Set up logging based on verbosity level."""
    if verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:  # verbose >= 2
        level = logging.DEBUG

    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


def read_document(path: Path):
    return parse_sections(path.read_text(encoding="utf-8"))


@app.command("parse", help="Parse Lofi files and write one JSON record per file.")
def parse(
    src: list[Path] = typer.Argument(
        ..., exists=True, dir_okay=False, help="Lofi source files"
    ),
    out: Path = typer.Option(
        None, "--out", "-o", help="Output JSONL file (default: stdout)"
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    ),
) -> None:
    """Parse each SRC file into sections and emit JSONL."""
    setup_logging(verbose)

    def records():
        for path in tqdm(src, disable=len(src) < 2 or out is None, unit="file"):
            document = read_document(path)
            logging.info(f"{path}: {len(document)} sections")
            yield SourceRecord(path=str(path), sections=document_to_list(document))

    if out is None:
        for record in records():
            typer.echo(orjson.dumps(record).decode("utf-8"))
    else:
        export_jsonl(records(), out)
        logging.info(f"Wrote {len(src)} records to {out}")


@app.command("element", help="Parse a single line and print it as JSON.")
def element(
    line: str = typer.Argument(..., help="One line of Lofi"),
) -> None:
    record = element_to_dict(parse_element(line))
    typer.echo(orjson.dumps(record, option=orjson.OPT_INDENT_2).decode("utf-8"))


@app.command("count", help="Count tag keys and mention key-paths in a Lofi file.")
def count(
    src: Path = typer.Argument(..., exists=True, dir_okay=False, help="Lofi file"),
    out: Path = typer.Option(None, "--out", "-o", help="Output CSV file"),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    ),
) -> None:
    """Print or export the tag/mention frequency table of SRC."""
    setup_logging(verbose)
    document = read_document(src)
    if out is None:
        typer.echo(count_keys(document).write_csv(), nl=False)
    else:
        export_count(document, out)
        logging.info(f"Wrote counts to {out}")


if __name__ == "__main__":
    app()
