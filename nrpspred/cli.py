# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .domain import ADomain
from .errors import NrpsError
from .predictions import PredictionCategory
from .predictor import run
from .predictor_config import load_config
from .report import format_predictions, format_results, save_results_to_csv

app = typer.Typer(
    help="nrpspred: Predict NRPS adenylation domain substrates from 34-residue signatures.",
    add_completion=False,  # Disable --install-completion and --show-completion
)
console = Console()


def _error(message: str, code: int = 1) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=code)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"nrpspred {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """Predict NRPS adenylation domain substrates from 34-residue signatures."""


def _print_table(domains: List[ADomain], categories: List[PredictionCategory], count: int) -> None:
    table = Table(title="nrpspred Substrate Predictions", show_lines=False)
    table.add_column("Name", no_wrap=True, style="dim")
    table.add_column("Stach", justify="left")
    table.add_column("AA10", justify="right")
    table.add_column("AA34", justify="right")
    for category in categories:
        table.add_column(str(category), justify="left")

    for domain in domains:
        stach = domain.stach_best()
        if stach:
            cells = [
                "|".join(p.name for p in stach),
                f"{stach[0].aa10_score:.2f}",
                f"{stach[0].aa34_score:.2f}",
            ]
        else:
            cells = ["-", "-", "-"]
        for category in categories:
            best = format_predictions(domain.get_best_n(category, count))
            cells.append(best if best else "[dim]N/A[/dim]")
        table.add_row(domain.name, *cells)

    console.print(table)


@app.command("predict")
def predict_cmd(
    signatures: Path = typer.Argument(
        ...,
        help="Tab-separated file: <aa34>\\t<name> or <aa34>\\t<substrate>\\t<id> per line",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML config file (default: ./nrps.toml if present)",
    ),
    model_dir: Optional[Path] = typer.Option(
        None,
        "--model-dir",
        "-m",
        help="Directory holding the NRPS2_*/NRPS3_* model sub-directories",
    ),
    stachelhaus_signatures: Optional[Path] = typer.Option(
        None,
        "--stachelhaus-signatures",
        "-s",
        help="Stachelhaus reference database (default: <model-dir>/signatures.tsv)",
    ),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        help="Number of best predictions reported per category (ties included)",
    ),
    skip_stachelhaus: bool = typer.Option(False, "--skip-stachelhaus", help="Do not run the Stachelhaus matcher"),
    skip_legacy: bool = typer.Option(False, "--skip-legacy", help="Do not run NRPSPredictor2 (legacy) models"),
    skip_current: bool = typer.Option(False, "--skip-current", help="Do not run current-generation models"),
    fungal: bool = typer.Option(False, "--fungal", help="Also run the legacy fungal three-cluster models"),
    keep_going: bool = typer.Option(
        False,
        "--keep-going",
        help="Skip malformed signature lines instead of stopping at the first one",
    ),
    jobs: int = typer.Option(1, "--jobs", "-j", help="Number of parallel workers across domains (-1: all CPUs)"),
    output_csv: Optional[str] = typer.Option(None, "--output-csv", "-o", help="Save results to CSV file"),
    table: bool = typer.Option(False, "--table", help="Render results as a table instead of the TSV report"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs to stderr"),
):
    """
    Predict substrates for every signature in SIGNATURES.

    Runs the SVM model bank and the Stachelhaus matcher and prints the
    tab-separated report on stdout, a table with --table, or writes a CSV
    file with --output-csv.
    """
    # False flags leave the config file value in place
    try:
        config = load_config(
            config_file,
            model_dir=model_dir,
            stachelhaus_signatures=stachelhaus_signatures,
            count=count,
            skip_stachelhaus=skip_stachelhaus or None,
            skip_legacy=skip_legacy or None,
            skip_current=skip_current or None,
            fungal=fungal or None,
        )
    except (FileNotFoundError, ValueError) as e:
        raise _error(f"invalid configuration: {e}")

    try:
        domains = run(config, signatures, skip_invalid=keep_going, n_jobs=jobs, verbose=verbose)
    except (NrpsError, FileNotFoundError, ValueError) as e:
        raise _error(str(e))

    categories = config.categories()

    if output_csv:
        try:
            save_results_to_csv(domains, output_csv, categories, config.count)
        except OSError as e:
            raise _error(f"could not write CSV file: {e}")
        typer.echo(f"Results saved to {output_csv}", err=True)
    elif table:
        _print_table(domains, categories, config.count)
    else:
        typer.echo(format_results(domains, categories, config.count), nl=False)


def main() -> None:
    app()
