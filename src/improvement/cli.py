"""CLI for the question improvement loop."""
import logging
import shutil
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from errors import StoreError, StoreLoadError
from quality.classify import classify
from store.persistence import QuestionStore

from .config import ImprovementConfig, load_config
from .dedupe import dedupe_topics
from .orchestrator import ImprovementOrchestrator, find_improvable
from .summary import RunSummary, write_run_output

logger = logging.getLogger(__name__)

console = Console()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def check_generation_cli(config: ImprovementConfig) -> None:
    """Exit if the generation command is not on PATH."""
    executable = config.command[0]
    if not shutil.which(executable):
        click.echo(f"Error: Generation CLI '{executable}' not found.", err=True)
        click.echo("Install it or set 'command' in the config file.", err=True)
        sys.exit(1)


def show_summary(summary: RunSummary) -> None:
    """Display run summary table and failures."""
    table = Table(title="Improvement Run Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")

    table.add_row("Total questions", str(summary.total_questions))
    table.add_row("Needing improvement", str(summary.needing_improvement))
    table.add_row("Processed", str(summary.processed))
    table.add_row("Improved", f"[green]{summary.improved}[/green]")
    for kind, count in summary.failure_counts().items():
        style = "red" if count else "dim"
        table.add_row(f"  {kind}", f"[{style}]{count}[/{style}]")
    table.add_row("Still needing improvement", str(summary.remaining))

    console.print()
    console.print(table)

    if summary.improved_ids:
        console.print("\n[bold]Improved:[/bold] " + ", ".join(summary.improved_ids))
    if summary.failures:
        console.print(f"\n[bold red]Failed attempts: {summary.failed}[/bold red]")
        for f in summary.failures:
            console.print(f"  - {f.record_id}: {f.kind} ({f.reason})")


config_option = click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file"
)
questions_dir_option = click.option(
    "--questions-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory containing topic stores (overrides config)"
)
output_file_option = click.option(
    "--output-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="GITHUB_OUTPUT",
    default=None,
    help="Append key=value run output to this file (default: $GITHUB_OUTPUT)"
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Question corpus maintenance: detect weak questions and improve them."""
    configure_logging(verbose)


@cli.command()
@config_option
@questions_dir_option
@output_file_option
@click.option(
    "--limit",
    type=int,
    envvar="INPUT_LIMIT",
    default=None,
    help="Maximum questions to improve this run (default: config batch_size)"
)
@click.option(
    "--check-cli/--no-check-cli",
    default=True,
    help="Verify the generation command is installed before running"
)
@click.option("--timing", is_flag=True, help="Print per-stage timing breakdown")
def improve(
    config_path: Optional[Path],
    questions_dir: Optional[Path],
    output_file: Optional[Path],
    limit: Optional[int],
    check_cli: bool,
    timing: bool,
):
    """
    Run one improvement pass over the question corpus.

    Selects the oldest questions with quality issues, asks the generation
    tool for improved versions, and merges valid results back into their
    topic stores, rebuilding the index after each one.
    """
    if limit is not None and limit <= 0:
        limit = None
    config = load_config(config_path, questions_dir=questions_dir, batch_size=limit)

    if check_cli:
        check_generation_cli(config)

    click.echo(f"Mode: improve up to {config.batch_size} questions")
    orchestrator = ImprovementOrchestrator(config)
    try:
        summary = orchestrator.run()
    except StoreLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    show_summary(summary)
    if timing:
        click.echo(orchestrator.telemetry.summary())

    write_run_output(output_file, summary.to_output())


@cli.command()
@config_option
@questions_dir_option
@click.option("--limit", type=int, default=20, help="Maximum rows to show")
def check(config_path: Optional[Path], questions_dir: Optional[Path], limit: int):
    """List questions needing improvement, oldest first."""
    config = load_config(config_path, questions_dir=questions_dir)
    store = QuestionStore(config.questions_dir, config.index_name)

    try:
        tagged = store.load_all()
    except StoreLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    improvable = find_improvable(tagged)
    click.echo(f"{len(improvable)} of {len(tagged)} questions need improvement")
    if not improvable:
        return

    table = Table(title="Questions Needing Improvement")
    table.add_column("ID", style="cyan")
    table.add_column("Topic")
    table.add_column("Last Updated")
    table.add_column("Issues", style="yellow")
    for candidate in improvable[:limit]:
        table.add_row(
            candidate.record.id,
            candidate.topic,
            candidate.record.last_updated or "-",
            ", ".join(candidate.issues),
        )
    console.print(table)


@cli.command()
@config_option
@questions_dir_option
@output_file_option
@click.option("--threshold", type=float, default=None, help="Similarity threshold (default: config)")
def dedupe(
    config_path: Optional[Path],
    questions_dir: Optional[Path],
    output_file: Optional[Path],
    threshold: Optional[float],
):
    """Remove at most one duplicate question per topic, keeping the older one."""
    config = load_config(config_path, questions_dir=questions_dir, similarity_threshold=threshold)
    store = QuestionStore(config.questions_dir, config.index_name)

    try:
        report = dedupe_topics(store, config.similarity_threshold)
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Topics processed: {report.topics_processed}")
    click.echo(f"Duplicates removed: {len(report.removed)}")
    for i, r in enumerate(report.removed, 1):
        click.echo(f"  {i}. [{r.topic}] Removed {r.removed_id}, kept {r.kept_id} ({r.similarity:.2f} similar)")
    if report.clean_topics:
        click.echo(f"Clean topics: {', '.join(report.clean_topics)}")
    click.echo(f"Total questions remaining: {report.total_remaining}")

    write_run_output(output_file, report.to_output())


@cli.command("rebuild-index")
@config_option
@questions_dir_option
def rebuild_index(config_path: Optional[Path], questions_dir: Optional[Path]):
    """Regenerate the index from every topic store."""
    config = load_config(config_path, questions_dir=questions_dir)
    store = QuestionStore(config.questions_dir, config.index_name)
    try:
        topics = store.rebuild_index()
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Wrote {store.index_path} ({len(topics)} topics)")


@cli.command()
@config_option
@questions_dir_option
def stats(config_path: Optional[Path], questions_dir: Optional[Path]):
    """Show question counts and issue counts per topic."""
    config = load_config(config_path, questions_dir=questions_dir)
    store = QuestionStore(config.questions_dir, config.index_name)

    try:
        topics = store.list_topics()
    except StoreLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    table = Table(title="Topic Statistics")
    table.add_column("Topic", style="cyan")
    table.add_column("Questions", justify="right")
    table.add_column("Needing improvement", justify="right")
    for topic in topics:
        questions = store.load(topic)
        flagged = sum(1 for q in questions if classify(q))
        table.add_row(topic, str(len(questions)), str(flagged))
    console.print(table)


if __name__ == "__main__":
    cli()
