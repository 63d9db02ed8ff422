from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import typer
from InquirerPy import inquirer

from experiments.crosstab_benchmark import run_crosstab_benchmark
from experiments.plots import PlotSaveConfig, plot_crosstab
from src.crosstab import Aggregators, CrossTabConfig, count, sum_of, total_of
from src.datahub import RecordFormat, load_records, split_multi_values
from src.pivot import MalformedChainError, by_field, pivot as pivot_records

app = typer.Typer()


def _read_records(path: Path, fmt: Optional[RecordFormat], explode: Sequence[str], separator: str) -> List[Dict[str, Any]]:
    try:
        records = load_records(path, fmt)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if explode:
        records = split_multi_values(records, explode, separator)
    print(f"[crosstab] Loaded {len(records)} records from {path}")
    return records


def _choose_field(records: Sequence[Dict[str, Any]], prompt: str, exclude: Optional[str] = None) -> str:
    fields = sorted({field for record in records for field in record if field != exclude})
    if not fields:
        raise typer.BadParameter("Records have no fields to pivot on.")
    return inquirer.select(message=prompt, choices=fields).execute()


def _check_fields(records: Sequence[Dict[str, Any]], *fields: str) -> None:
    known = {field for record in records for field in record}
    missing = [field for field in fields if field not in known]
    if records and missing:
        raise typer.BadParameter(f"Unknown field(s): {', '.join(missing)}. Available: {', '.join(sorted(known))}")


@app.command()
def crosstab(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV, JSON or JSON Lines file of records."),
    columns: Optional[str] = typer.Option(None, "--columns", "-c", help="Field for the column dimension."),
    rows: Optional[str] = typer.Option(None, "--rows", "-r", help="Field for the row dimension."),
    label: str = typer.Option("count", "--label", help="Name shown in the total row and column."),
    sum_field: Optional[str] = typer.Option(None, "--sum", help="Sum this field per cell instead of counting."),
    explode: List[str] = typer.Option([], "--explode", help="Fields holding delimited multi-values."),
    separator: str = typer.Option(";", "--separator", help="Delimiter for --explode fields."),
    fmt: Optional[str] = typer.Option(None, "--format", help="Record format (csv, json, jsonl)."),
    strict: bool = typer.Option(False, "--strict", help="Fail instead of printing the raw grouping on malformed input."),
    plots_root: Optional[Path] = typer.Option(None, "--plots-root", help="Directory for a heatmap of the table."),
    plots_tag: Optional[str] = typer.Option(None, "--plots-tag", help="Folder suffix for this run (defaults to timestamp)."),
    save_static: bool = typer.Option(False, help="Write a static PNG snapshot when saving plots."),
    save_html: bool = typer.Option(True, help="Write an interactive HTML plot when saving."),
) -> None:
    """
    Pivot records by a column field then a row field and print the cross-tab with totals.
    """
    if fmt is not None and fmt not in ("csv", "json", "jsonl"):
        raise typer.BadParameter(f"Unsupported format '{fmt}'", param_hint="--format")
    records = _read_records(path, fmt, explode, separator)  # type: ignore[arg-type]

    columns = columns or _choose_field(records, "Column dimension:")
    rows = rows or _choose_field(records, "Row dimension:", exclude=columns)
    _check_fields(records, columns, rows, *([sum_field] if sum_field else []))

    grouped = pivot_records(records, by_field(columns), columns).pivot(by_field(rows), rows)
    if sum_field:
        aggregators = Aggregators(cell=sum_of(sum_field), row_total=total_of, col_total=total_of)
    else:
        aggregators = Aggregators(cell=count)
    try:
        table = grouped.crosstab(label, aggregators=aggregators, config=CrossTabConfig(strict=strict))
    except MalformedChainError as exc:
        if strict:
            raise typer.BadParameter(str(exc)) from exc
        print(f"[crosstab] Cannot tabulate: {exc}")
        raise typer.Exit(code=1)

    print(table.to_frame().to_string())

    if plots_root:
        tag = plots_tag or datetime.utcnow().strftime("%Y%m%d-%H%M%S")
        save_config = PlotSaveConfig(base_dir=plots_root, run_tag=tag, save_static=save_static, save_html=save_html)
        print(f"[plots] Saving figures under {save_config.run_dir}")
        plot_crosstab(table, save_to=save_config.for_plot(f"{rows}-by-{columns}"))


@app.command()
def pivot(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV, JSON or JSON Lines file of records."),
    by: List[str] = typer.Option(..., "--by", "-b", help="Field to group by; repeat to chain pivots."),
    named: bool = typer.Option(True, "--named/--unnamed", help="Key buckets by field name or by position."),
    explode: List[str] = typer.Option([], "--explode", help="Fields holding delimited multi-values."),
    separator: str = typer.Option(";", "--separator", help="Delimiter for --explode fields."),
) -> None:
    """
    Print every composite key with the size of its bucket.
    """
    records = _read_records(path, None, explode, separator)
    _check_fields(records, *by)

    grouped: Any = records
    for field in by:
        grouped = pivot_records(grouped, by_field(field), field if named else None)

    for key, bucket in grouped.items():
        rendered = ", ".join(f"{name}={value}" for name, value in key.entries) if named else key.plain()
        print(f"{rendered}\t{len(bucket)}")


@app.command()
def benchmark(
    records: int = typer.Option(100_000, "--records", "-n", min=1, help="Number of random garments."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the record generator."),
    show: bool = typer.Option(False, "--show", help="Print the resulting table."),
) -> None:
    """
    Time a two-dimension cross-tab over randomly generated garment records.
    """
    result = run_crosstab_benchmark(records, seed=seed)
    if show:
        for row in result.table.rows():
            print(" --- ".join(str(cell) for cell in row))
    print(f"Execution time for {result.records} list items: {result.elapsed:.3f} seconds.")


if __name__ == "__main__":
    app()
