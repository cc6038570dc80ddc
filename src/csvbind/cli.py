from __future__ import annotations

from pathlib import Path
from typing import Optional
import logging

import typer
import yaml

from csvbind.codec import CsvBindError, CsvCodec, load_codec
from csvbind.codec.mapping import import_record_type
from csvbind.data.io import jsonl_lines, jsonl_write

app = typer.Typer(help="csvbind CLI")


def _setup_logging(verbose: bool) -> logging.Logger:
    logger = logging.getLogger("csvbind")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[csvbind] %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger


def _load(mapping: Path, record: Optional[str]) -> CsvCodec:
    mapping = mapping.expanduser().resolve()
    if not mapping.is_file():
        raise typer.BadParameter(f"{mapping} not found")
    try:
        record_type = import_record_type(record) if record else None
        return load_codec(mapping, record_type=record_type)
    except (ValueError, ImportError, yaml.YAMLError) as e:
        raise typer.BadParameter(str(e))


def _fail(e: Exception) -> None:
    typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command("to-jsonl")
def to_jsonl(
    mapping: Path = typer.Argument(..., help="YAML binding table"),
    csv_path: Path = typer.Argument(..., help="CSV file to import"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write JSONL here instead of stdout"),
    record: Optional[str] = typer.Option(None, "--record", help="Record class 'module:Class' (overrides mapping)"),
    encoding: str = typer.Option("utf-8", "--encoding"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Import CSV_PATH with MAPPING and emit one JSON object per record."""
    log = _setup_logging(verbose)
    codec = _load(mapping, record)
    try:
        records = codec.import_(csv_path.expanduser(), encoding=encoding)
    except (CsvBindError, UnicodeDecodeError) as e:
        _fail(e)

    if out:
        n = jsonl_write(out.expanduser().resolve(), records)
        log.debug("Wrote %d record(s) to %s", n, out)
        typer.secho(f"Wrote {out} ({n} records)", fg=typer.colors.GREEN)
    else:
        for line in jsonl_lines(records):
            typer.echo(line)


@app.command("convert")
def convert(
    mapping: Path = typer.Argument(..., help="YAML binding table"),
    csv_path: Path = typer.Argument(..., help="CSV file to import"),
    out_csv: Path = typer.Argument(..., help="CSV file to write"),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="Output delimiter (default: mapping's)"),
    header: Optional[bool] = typer.Option(None, "--header/--no-header", help="Write a header line"),
    quote: Optional[bool] = typer.Option(None, "--quote/--no-quote", help="Quote fields that need it on write"),
    record: Optional[str] = typer.Option(None, "--record", help="Record class 'module:Class' (overrides mapping)"),
    encoding: str = typer.Option("utf-8", "--encoding"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Re-emit CSV_PATH through MAPPING, optionally with other output options."""
    log = _setup_logging(verbose)
    codec = _load(mapping, record)
    try:
        records = codec.import_(csv_path.expanduser(), encoding=encoding)
    except (CsvBindError, UnicodeDecodeError) as e:
        _fail(e)

    if delimiter is not None:
        codec.delimiter = delimiter
    if header is not None:
        codec.contain_header = header
    if quote is not None:
        codec.quote_on_write = quote

    out_csv = out_csv.expanduser().resolve()
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    try:
        codec.export(records, out_csv, encoding=encoding)
    except (CsvBindError, UnicodeEncodeError) as e:
        _fail(e)
    log.debug("columns: %s", ", ".join(c.name for c in codec.columns))
    typer.secho(f"Wrote {out_csv} ({len(records)} rows)", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
