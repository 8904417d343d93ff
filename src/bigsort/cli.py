from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import load_config, load_sort_settings
from .errors import BigSortError
from .generator import generate_unique_sample, make_rng
from .plotting import plot_presence, plot_runtime
from .reporting import get_system_info, print_sort_report
from .runner import run_sweep
from .sorter import BigSorter, DuplicatePolicy
from .summarize import read_jsonl, summarize_runs

app = typer.Typer(
    help="bigsort CLI: pigeonhole sort of distinct positive integers over a presence indicator, with sweeps and reports.",
    rich_markup_mode="rich",
)
console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _read_values(source: Path) -> List[int]:
    try:
        text = sys.stdin.read() if str(source) == "-" else source.read_text()
    except OSError as e:
        _fail(f"Cannot read {source}: {e.strerror or e}.")
    try:
        return [int(tok) for tok in text.split()]
    except ValueError:
        _fail(f"{source} does not hold whitespace-separated integers.")


def _fail(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True)
    raise typer.Exit(1)


@app.command()
def sort(
    size: Optional[int] = typer.Option(None, "--size", "-n", help="Number of unique values to generate"),
    max_value: Optional[int] = typer.Option(None, "--max-value", "-m", help="Largest value that may be generated"),
    seed: Optional[int] = typer.Option(None, help="Seed for the sample generator (random if omitted)"),
    duplicates: Optional[DuplicatePolicy] = typer.Option(None, help="How repeated values are treated [default: collapse]"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="Sort integers read from a file ('-' for stdin)"),
    config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="YAML file with a sort section"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log sort phases to stderr"),
):
    """Generate (or read) an array, sort it, and print the cost figures.

    [bold]Example:[/bold]
        bigsort sort --size 10 --max-value 100 --seed 7
    """
    _setup_logging(verbose)
    if input_file is not None:
        values = _read_values(input_file)
    else:
        min_value = 1
        if config is not None:
            try:
                settings = load_sort_settings(config)
            except (TypeError, ValueError, yaml.YAMLError) as e:
                _fail(f"Invalid sort settings in {config}: {e}")
            size = settings.size if size is None else size
            max_value = settings.max_value if max_value is None else max_value
            seed = settings.seed if seed is None else seed
            min_value = settings.min_value
            if duplicates is None:
                try:
                    duplicates = DuplicatePolicy(settings.duplicates)
                except ValueError as e:
                    _fail(f"Invalid sort settings in {config}: {e}")
        if size is None:
            size = typer.prompt("Enter array size", type=int)
        if max_value is None:
            max_value = typer.prompt("Enter max element value", type=int)
        if min_value < 1:
            _fail(f"Minimum value ({min_value}) must be a positive integer.")
        try:
            values = generate_unique_sample(size, min_value, max_value, rng=make_rng(seed))
        except BigSortError as e:
            _fail(str(e))

    sorter = BigSorter(values, duplicates=duplicates or DuplicatePolicy.COLLAPSE)
    try:
        sorter.sort()
    except BigSortError as e:
        _fail(str(e))
    print_sort_report(console, values, sorter)


@app.command()
def sweep(
    config: Path = typer.Option(..., exists=True, dir_okay=False, help="Path to YAML sweep config"),
    out_dir: Path = typer.Option(Path("artifacts"), help="Directory for artifacts"),
    seed: Optional[int] = typer.Option(None, help="Seed for sweep order and samples (overrides config)"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress progress output"),
):
    """Sort generated samples over a size x max_value grid and write JSONL results.

    [bold]Example:[/bold]
        bigsort sweep --config examples/sweep.yaml --out-dir artifacts
    """
    cfg = load_config(config)
    out_dir.mkdir(parents=True, exist_ok=True)
    results_path = out_dir / "runs.jsonl"

    if not quiet:
        console.rule("[bold blue]bigsort - Running Sweep[/bold blue]")
        console.print(f"[dim]Config:[/dim] {config}")
        console.print(f"[dim]Output:[/dim] {out_dir}")
        console.print()

    written = run_sweep(cfg, results_path, seed=seed)

    if not quiet:
        console.print(f"[green]✓[/green] Wrote {written} runs to [bold]{results_path}[/bold]")
        console.print()
        console.print("[dim]Next steps:[/dim]")
        console.print(f"  bigsort summarize --runs {results_path}")
        console.print(f"  bigsort plot --summary {out_dir / 'summary.csv'}")


@app.command()
def summarize(
    runs: Path = typer.Option(Path("artifacts/runs.jsonl"), exists=True, dir_okay=False),
    out_csv: Path = typer.Option(Path("artifacts/summary.csv"), dir_okay=False),
    include_outliers: bool = typer.Option(False, help="Include outliers in medians/means"),
):
    """Summarize JSONL runs into CSV with medians and percentiles."""
    df = summarize_runs(runs, include_outliers=include_outliers)
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_csv, index=False)
    console.print(f"Wrote summary to {out_csv}")


@app.command()
def plot(
    summary: Path = typer.Option(Path("artifacts/summary.csv"), exists=True, dir_okay=False),
    x: str = typer.Option("max_value", help="X axis parameter"),
    y: str = typer.Option("sort_ns_median", help="Y axis metric"),
    color: str = typer.Option("size", help="Series grouping column"),
    out_html: Optional[Path] = typer.Option(Path("artifacts/runtime.html")),
    no_fit: bool = typer.Option(False, help="Disable Big-O fit overlay"),
    log_x: bool = typer.Option(False, help="Use log scale for X axis"),
    log_y: bool = typer.Option(False, help="Use log scale for Y axis"),
):
    """Plot sort time against the value bound from the summary CSV."""
    chart = plot_runtime(summary, x=x, y=y, color=color, show_fit=not no_fit, log_x=log_x, log_y=log_y)
    if out_html:
        out_html.parent.mkdir(parents=True, exist_ok=True)
        chart.save(str(out_html))
        console.print(f"Wrote plot to {out_html}")
    else:
        # Vega-Lite JSON to stdout for piping
        json.dump(chart.to_dict(), sys.stdout)


@app.command()
def presence(
    summary: Path = typer.Option(Path("artifacts/summary.csv"), exists=True, dir_okay=False, help="Path to summary CSV"),
    x: str = typer.Option("max_value", help="X axis parameter"),
    color: str = typer.Option("size", help="Series grouping column"),
    output: Path = typer.Option(Path("artifacts/presence.html"), help="Output path for the chart"),
    log_x: bool = typer.Option(False, help="Use log scale for X axis"),
    log_y: bool = typer.Option(False, help="Use log scale for Y axis"),
):
    """Chart presence-indicator length and memory against the value bound."""
    chart = plot_presence(summary, x=x, color=color, log_x=log_x, log_y=log_y)
    output.parent.mkdir(parents=True, exist_ok=True)
    chart.save(str(output))
    console.print(f"[green]✓[/green] Presence chart saved to [bold]{output}[/bold]")


@app.command()
def inspect(
    runs: Path = typer.Option(Path("artifacts/runs.jsonl"), exists=True, dir_okay=False, help="Path to JSONL runs"),
    count: int = typer.Option(10, "--count", "-n", help="Number of runs to show"),
    status: Optional[str] = typer.Option(None, help="Filter by status (ok, invalid_range, error)"),
):
    """Preview recent sweep runs.

    [bold]Example:[/bold]
        bigsort inspect --runs artifacts/runs.jsonl --count 5
    """
    all_runs = read_jsonl(runs)
    if not all_runs:
        console.print("[yellow]No runs found in the file.[/yellow]")
        return

    filtered_runs = [r for r in all_runs if r.get("status") == status] if status else all_runs

    total = len(all_runs)
    ok_count = sum(1 for r in all_runs if r.get("status") == "ok")
    invalid_count = sum(1 for r in all_runs if r.get("status") == "invalid_range")
    error_count = sum(1 for r in all_runs if r.get("status") == "error")

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column("", style="dim")
    stats_table.add_column("", style="bold")
    stats_table.add_row("Total Runs", str(total))
    stats_table.add_row("Successful", f"[green]{ok_count}[/green]")
    stats_table.add_row("Invalid range", f"[yellow]{invalid_count}[/yellow]" if invalid_count > 0 else "0")
    stats_table.add_row("Errors", f"[red]{error_count}[/red]" if error_count > 0 else "0")
    console.print(Panel(stats_table, title="Run Statistics", border_style="blue"))

    table = Table(title=f"Recent Runs (last {min(count, len(filtered_runs))})")
    table.add_column("Status", justify="center")
    table.add_column("Size", justify="right")
    table.add_column("Max value", justify="right")
    table.add_column("Presence", justify="right")
    table.add_column("Sort (ms)", justify="right")
    table.add_column("RSS (MB)", justify="right")

    for rec in filtered_runs[-count:]:
        status_val = rec.get("status", "")
        if status_val == "ok":
            status_display = "[green]✓ ok[/green]"
        elif status_val == "invalid_range":
            status_display = "[yellow]✗ invalid range[/yellow]"
        else:
            status_display = f"[red]{status_val}[/red]"
        rss = rec.get("rss_mb")
        table.add_row(
            status_display,
            str(rec.get("size", "-")),
            str(rec.get("max_value", "-")),
            str(rec.get("presence_size", "-")),
            str(rec.get("sort_ms", "-")),
            f"{rss:.2f}" if rss is not None else "-",
        )
    console.print(table)


@app.command()
def sysinfo():
    """Display system information for reproducibility."""
    info = get_system_info()

    console.rule("[bold blue]bigsort System Information[/bold blue]")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Property", style="dim")
    table.add_column("Value", style="bold")
    table.add_row("Platform", info["platform"])
    table.add_row("Python", info["python_version"])
    table.add_row("Processor", info["processor"] or "N/A")
    table.add_row("Architecture", info["architecture"])
    table.add_row("CPU Cores", f"{info['cpu_count_physical']} physical / {info['cpu_count_logical']} logical")
    if "cpu_freq_mhz" in info:
        table.add_row("CPU Frequency", f"{info['cpu_freq_mhz']} MHz")
    table.add_row("Memory", f"{info['memory_total_gb']} GB")
    table.add_row("Hostname", info["hostname"])
    table.add_row("Timestamp", info["timestamp"])
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
