"""
Command-line interface for Resume Refiner.

Provides commands to normalize a generated resume, check keyword
coverage, run the refinement loop against Claude, and review an
original/optimized comparison.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import MAX_PASSES, RefinementConfig
from .diff_engine import compare as compare_texts, get_changes_summary, render_html
from .keyword_loader import KeywordLoadError, load_keywords, parse_keyword_list
from .llm_client import DEFAULT_MODEL, LLMClientError, create_rewriter
from .models import LineTag, RefinementOutcome
from .normalizer import markdown_to_plain_text, normalize
from .orchestrator import RefinementOrchestrator
from .prioritizer import select_must_include_skills
from .verifier import coverage as keyword_coverage

console = Console()

_TAG_STYLES = {
    LineTag.REMOVED: "red",
    LineTag.ADDED: "green",
    LineTag.UNCHANGED: "",
    LineTag.BLANK: "",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return path.read_text(encoding="latin-1")


def _collect_keywords(keywords: tuple[str, ...], keywords_file: Optional[Path]) -> list[str]:
    collected: list[str] = []
    for value in keywords:
        collected.extend(parse_keyword_list(value))
    if keywords_file is not None:
        collected.extend(load_keywords(keywords_file))
    return collected


keyword_options = [
    click.option(
        "--keyword",
        "-k",
        "keywords",
        multiple=True,
        help="Target keyword(s); repeat or separate with commas.",
    ),
    click.option(
        "--keywords-file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Keyword file (CSV, Excel or text).",
    ),
]


def with_keyword_options(func):
    for option in reversed(keyword_options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Resume Refiner - ATS keyword refinement for generated resumes."""


@main.command("normalize")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write result here instead of stdout.")
def normalize_command(source: Path, output: Optional[Path]) -> None:
    """Normalize headings and spacing of a markdown resume."""
    result = normalize(_read_text(source))
    if output:
        output.write_text(result + "\n", encoding="utf-8")
        console.print(f"[green]Normalized resume written to:[/green] {output}")
    else:
        click.echo(result)


@main.command("coverage")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@with_keyword_options
@click.option("--variants", is_flag=True, default=False, help="Accept near-literal variants (MS Excel / Excel).")
def coverage_command(
    document: Path,
    keywords: tuple[str, ...],
    keywords_file: Optional[Path],
    variants: bool,
) -> None:
    """Show which target keywords a document contains."""
    try:
        keyword_list = _collect_keywords(keywords, keywords_file)
    except KeywordLoadError as e:
        console.print(f"[red]Keyword loading error:[/red] {e}")
        sys.exit(1)

    result = keyword_coverage(normalize(_read_text(document)), keyword_list, match_variants=variants)

    table = Table(title="Keyword Coverage", show_header=True)
    table.add_column("Keyword", style="cyan")
    table.add_column("Present")
    for kw in result.present:
        table.add_row(kw, "[green]yes[/green]")
    for kw in result.missing:
        table.add_row(kw, "[yellow]no[/yellow]")
    console.print(table)
    console.print(f"Coverage: {len(result.present)}/{len(result.keywords)} ({result.ratio:.0%})")


@main.command("optimize")
@click.option(
    "--resume",
    "resume_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Draft resume (markdown) to refine.",
)
@click.option(
    "--job",
    "job_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Job description text file.",
)
@with_keyword_options
@click.option(
    "--original-resume",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Candidate's original resume, used to pick must-include skills (defaults to --resume).",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), required=True, help="Output path for the refined resume.")
@click.option("--api-key", type=str, envvar="ANTHROPIC_API_KEY", help="Anthropic API key. Can also be set via ANTHROPIC_API_KEY env var.")
@click.option("--model", type=str, default=DEFAULT_MODEL, show_default=True, help="Model identifier.")
@click.option("--max-passes", type=click.IntRange(1, MAX_PASSES), default=MAX_PASSES, show_default=True, help="Maximum rewrite passes.")
@click.option("--no-skill-backfill", is_flag=True, default=False, help="Skip the skills backfill pass.")
@click.option("--variants", is_flag=True, default=False, help="Accept near-literal keyword variants.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output.")
def optimize_command(
    resume_path: Path,
    job_path: Path,
    keywords: tuple[str, ...],
    keywords_file: Optional[Path],
    original_resume: Optional[Path],
    output: Path,
    api_key: Optional[str],
    model: str,
    max_passes: int,
    no_skill_backfill: bool,
    variants: bool,
    verbose: bool,
) -> None:
    """
    Refine a draft resume until target keywords are covered.

    Example:

        resume-refiner optimize --resume draft.md --job jd.txt -k "SaaS, retention" -o refined.md
    """
    _configure_logging(verbose)

    try:
        keyword_list = _collect_keywords(keywords, keywords_file)
    except KeywordLoadError as e:
        console.print(f"[red]Keyword loading error:[/red] {e}")
        sys.exit(1)

    draft = _read_text(resume_path)
    job_description = _read_text(job_path)
    source_resume = _read_text(original_resume) if original_resume else draft

    must_include = [] if no_skill_backfill else select_must_include_skills(source_resume, job_description)
    config = RefinementConfig(
        max_passes=max_passes,
        enable_skill_backfill=not no_skill_backfill,
        match_variants=variants,
    )

    console.print(Panel.fit(
        "[bold blue]Resume Refiner[/bold blue]\n"
        f"{len(keyword_list)} target keywords, up to {max_passes} pass(es)",
        border_style="blue",
    ))

    try:
        with console.status("[bold green]Refining resume..."):
            outcome = asyncio.run(_run_refinement(
                api_key, model, config, draft, job_description, keyword_list, must_include
            ))
    except LLMClientError as e:
        console.print(f"[red]Optimization failed:[/red] {e}")
        console.print("Check your API key and network connection, then run the command again.")
        sys.exit(1)

    output.write_text(outcome.document.text + "\n", encoding="utf-8")
    _display_outcome(outcome, verbose)
    console.print(f"\n[bold green]Success![/bold green] Refined resume saved to: {output}")


async def _run_refinement(
    api_key: Optional[str],
    model: str,
    config: RefinementConfig,
    draft: str,
    job_description: str,
    keywords: list[str],
    must_include: list[str],
) -> RefinementOutcome:
    rewriter = create_rewriter(api_key=api_key, model=model)
    try:
        orchestrator = RefinementOrchestrator(rewriter, config)
        return await orchestrator.refine(draft, job_description, keywords, must_include=must_include)
    finally:
        await rewriter.aclose()


def _display_outcome(outcome: RefinementOutcome, verbose: bool) -> None:
    """Display refinement summary."""
    console.print("\n[bold]Refinement Summary[/bold]")
    console.print(f"Passes completed: {outcome.passes_completed} ({outcome.stop_reason.value})")
    console.print(
        f"Keyword coverage: {len(outcome.coverage.present)}/{len(outcome.coverage.keywords)}"
    )

    if outcome.error:
        console.print(f"[yellow]A follow-up pass failed and was skipped:[/yellow] {outcome.error}")

    if outcome.coverage.missing:
        console.print(
            "[cyan]Not covered (informational):[/cyan] " + ", ".join(outcome.coverage.missing)
        )

    if outcome.skill_coverage and outcome.skill_coverage.missing:
        console.print(
            "[cyan]Skills still absent:[/cyan] " + ", ".join(outcome.skill_coverage.missing)
        )

    if verbose and outcome.last_pass is not None:
        console.print(f"\n[dim]Last pass: {outcome.last_pass.stage.value} #{outcome.last_pass.index}[/dim]")


@main.command("compare")
@click.argument("original", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("optimized", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@with_keyword_options
@click.option("--plain", is_flag=True, default=False, help="Convert the optimized markdown to plain text first.")
@click.option("--html", "html_path", type=click.Path(dir_okay=False, path_type=Path), help="Also write an HTML report.")
@click.option(
    "--highlight-limit",
    type=click.IntRange(min=1),
    default=RefinementConfig.highlight_keyword_limit,
    show_default=True,
    help="Maximum number of keywords highlighted.",
)
def compare_command(
    original: Path,
    optimized: Path,
    keywords: tuple[str, ...],
    keywords_file: Optional[Path],
    plain: bool,
    html_path: Optional[Path],
    highlight_limit: int,
) -> None:
    """Show an original/optimized comparison with keywords highlighted."""
    config = RefinementConfig(highlight_keyword_limit=highlight_limit)

    try:
        keyword_list = _collect_keywords(keywords, keywords_file)
    except KeywordLoadError as e:
        console.print(f"[red]Keyword loading error:[/red] {e}")
        sys.exit(1)

    optimized_text = _read_text(optimized)
    if plain:
        optimized_text = markdown_to_plain_text(optimized_text)

    comparison = compare_texts(
        _read_text(original),
        optimized_text,
        keyword_list,
        highlight_limit=config.highlight_keyword_limit,
    )

    table = Table(show_header=True, expand=True)
    table.add_column("Original")
    table.add_column("Optimized")

    rows = max(len(comparison.original_lines), len(comparison.optimized_lines))
    for idx in range(rows):
        left = comparison.original_lines[idx] if idx < len(comparison.original_lines) else None
        right = comparison.optimized_lines[idx] if idx < len(comparison.optimized_lines) else None
        table.add_row(_render_cell(left), _render_cell(right))

    console.print(table)

    summary = get_changes_summary(comparison)
    console.print(
        f"Removed lines: {summary['removed_lines']}  Added lines: {summary['added_lines']}  "
        f"Highlighted: {', '.join(summary['highlighted_terms']) or 'none'}"
    )

    if html_path:
        body = "\n".join(
            ['<div class="side original">']
            + [render_html(line) for line in comparison.original_lines]
            + ['</div>', '<div class="side optimized">']
            + [render_html(line) for line in comparison.optimized_lines]
            + ['</div>']
        )
        html_path.write_text(body + "\n", encoding="utf-8")
        console.print(f"[green]HTML report written to:[/green] {html_path}")


def _render_cell(line) -> Text:
    if line is None:
        return Text("")
    text = Text(style=_TAG_STYLES[line.tag])
    for fragment, is_highlight in line.segments():
        text.append(fragment, style="bold black on yellow" if is_highlight else None)
    return text


def run_cli() -> None:
    """Entry point for the CLI."""
    main()


if __name__ == "__main__":
    run_cli()
