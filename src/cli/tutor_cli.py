"""
libregto CLI - terminal poker strategy tutor

A thin renderer over TutorService: every decision (scoring, unlocks,
achievements) happens in the core; this module only prompts and prints.

Usage:
    libregto progress              # Stages, units, unlocks
    libregto drill hand-ranking    # Run a drill or scenario
    libregto hand KAs              # Canonical form, equity, tier
    libregto classify Kh 7d 2c     # Board texture
    libregto range CO              # Opening range grid
    libregto build BTN AA KK AKs   # Score a hand-built range
    libregto export backup.json    # Save progress
    libregto import backup.json    # Restore progress
    libregto reset --yes           # Start over
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from config import get_settings
from src.core.errors import InvalidNotation, PersistenceFailure, UnitLocked, UnknownUnit
from src.core.log_setup import configure_logging
from src.engine.base import AnswerResult, Question, SessionSummary
from src.hands.equity import equity_percent
from src.hands.hand import GRID_SIZE, RANKS, from_grid, grid_coord, parse
from src.hands.tiers import HAND_TIERS, hand_tier
from src.progress.store import ProgressChange
from src.ranges.algebra import percentage_of_deck, range_to_grid
from src.ranges.board import TEXTURE_NOTES, classify_board_texture
from src.ranges.opening import POSITIONS, opening_range
from src.tutor.service import TutorService

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="libregto",
    help="♠ libregto - poker strategy tutor for the terminal",
    add_completion=True,
    rich_markup_mode="rich",
)

console = Console()

QUIT_INPUTS = {"q", "quit", "exit"}


def get_service(seed: int | None = None) -> TutorService:
    return TutorService(seed=seed)


def _fail(message: str, code: int = 1) -> None:
    console.print(f"[red]{escape(message)}[/]")
    raise typer.Exit(code)


def _print_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        console.print(f"[yellow]⚠ {escape(warning)}[/]")


# =============================================================================
# Drill Commands
# =============================================================================


@app.command()
def drill(
    unit: Annotated[str, typer.Argument(help="Drill or scenario id, e.g. hand-ranking")],
    seed: Annotated[
        int | None, typer.Option("--seed", "-s", help="Seed for reproducible questions")
    ] = None,
    questions: Annotated[
        int | None, typer.Option("--questions", "-n", min=1, help="Override the question count")
    ] = None,
) -> None:
    """
    Run a drill or scenario session.

    Answer with the option text or its number; q quits.

    Examples:
        libregto drill hand-strength
        libregto drill open-fold --seed 7
        libregto drill bb-defense -n 5
    """
    service = get_service(seed)
    _print_warnings(service.store.warnings)

    try:
        session = service.start_drill(unit, total_questions=questions)
    except UnknownUnit as e:
        _fail(str(e), code=2)
    except UnitLocked as e:
        _fail(str(e))

    engine = session.engine
    console.print(
        Panel(
            f"[bold cyan]{session.handler.title.upper()}[/]\n"
            f"Questions: {engine.total_questions}\n"
            f"Pass: {engine.pass_threshold:.0f}%",
            title="♠",
            border_style="cyan",
        )
    )

    question = engine.start()
    while True:
        _render_question(engine.question_number, engine.total_questions, question)
        try:
            answer = Prompt.ask("[cyan]>_[/cyan]")
        except (EOFError, KeyboardInterrupt):
            answer = "q"

        if answer.strip().lower() in QUIT_INPUTS:
            summary = engine.stop()
            _render_summary(summary)
            console.print("[dim]Session stopped; nothing recorded.[/]")
            return

        result = engine.submit_answer(answer)
        if result is not None:
            _render_feedback(result)

        summary = engine.next_question()
        if summary is not None:
            break
        question = engine.current_question

    _render_summary(summary)
    if session.change is not None:
        _render_change(session.change)


def _render_question(number: int, total: int, question: Question) -> None:
    console.print(f"\n[dim]{number}/{total}[/]  [bold]{question.prompt}[/]")
    if question.options:
        choices = "   ".join(f"[cyan]{i}[/] {option}" for i, option in enumerate(question.options, 1))
        console.print(f"  {choices}")


def _render_feedback(result: AnswerResult) -> None:
    elapsed = f"{result.elapsed_ms / 1000:.1f}s"
    if result.correct:
        streak = f"  🔥 {result.stats.streak}" if result.stats.streak >= 3 else ""
        console.print(f"[green]✓ Correct[/] [dim]{elapsed}[/]{streak}")
    else:
        console.print(f"[red]✗ {result.correct_answer}[/] [dim]{elapsed}[/]")
    if result.explanation:
        console.print(f"  [dim]{result.explanation}[/]")


def _render_summary(summary: SessionSummary) -> None:
    table = Table(title="Session Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Score", f"{summary.correct}/{summary.total_questions} ({summary.accuracy:.0f}%)")
    table.add_row("Average time", f"{summary.avg_time_ms / 1000:.1f}s")
    table.add_row("Fastest", f"{summary.fastest_time_ms / 1000:.1f}s")
    table.add_row("Best streak", str(summary.best_streak))
    if summary.passed is not None:
        table.add_row("Result", "[green]PASSED[/]" if summary.passed else "[red]NOT YET[/]")
    console.print(table)

    if len(summary.category_stats) > 1:
        breakdown = Table(title="By Category")
        breakdown.add_column("Category", style="cyan")
        breakdown.add_column("Correct", justify="right")
        breakdown.add_column("Accuracy", justify="right")
        for category, stats in sorted(summary.category_stats.items()):
            breakdown.add_row(category, f"{stats.correct}/{stats.total}", f"{stats.accuracy:.0f}%")
        console.print(breakdown)


def _render_change(change: ProgressChange) -> None:
    for unit_id in change.newly_completed:
        console.print(f"[green]✓ Completed {unit_id}[/]")
    for group_id in change.newly_unlocked_groups:
        console.print(f"[bold magenta]🔓 Stage unlocked: {group_id}[/]")
    for unit_id in change.newly_unlocked:
        console.print(f"[magenta]🔓 Unlocked {unit_id}[/]")
    for achievement in change.new_achievements:
        console.print(f"[yellow]🏆 Achievement: {achievement}[/]")
    _print_warnings(change.warnings)


# =============================================================================
# Progress Commands
# =============================================================================


@app.command()
def progress() -> None:
    """Show every stage with unit status and bests."""
    service = get_service()
    store = service.store
    _print_warnings(store.warnings)

    console.print(f"[bold]Overall progress: {store.overall_progress()}%[/]")
    lifetime = store.lifetime_stats()
    if lifetime.sessions:
        console.print(
            f"[dim]Lifetime: {lifetime.sessions} sessions, {lifetime.questions} questions, "
            f"{lifetime.accuracy:.0f}% correct, best streak {lifetime.best_streak}[/]"
        )
    for group in store.curriculum.groups:
        locked = "" if store.is_group_unlocked(group.id) else " 🔒"
        stats = store.stats(group.id)
        table = Table(
            title=f"{group.title}{locked}  ({stats.completed}/{stats.total}, {store.group_progress(group.id)}%)"
        )
        table.add_column("Unit", style="cyan")
        table.add_column("Status")
        table.add_column("Best", justify="right")
        table.add_column("Pass", justify="right")
        table.add_column("Attempts", justify="right")
        table.add_column("Best avg", justify="right")

        for status in service.units(group.id):
            if status.completed:
                state = "[green]✓ done[/]"
            elif status.unlocked:
                state = "[yellow]open[/]"
            else:
                state = "[dim]locked[/]"
            best_time = f"{status.best_avg_time / 1000:.1f}s" if status.timed and status.best_avg_time else "-"
            table.add_row(
                status.unit_id,
                state,
                f"{status.best_score:.0f}%",
                f"{status.threshold:.0f}%",
                str(status.attempts),
                best_time,
            )
        if group.units:
            console.print(table)
        else:
            console.print(f"[dim]{group.title}{locked}: coming soon[/]")

        earned = store.achievements(group.id)
        if earned:
            console.print(f"  🏆 {', '.join(earned)}")


@app.command("export")
def export_progress(
    output: Annotated[
        Path | None, typer.Argument(help="Output file (prints to stdout when omitted)")
    ] = None,
) -> None:
    """Export progress as JSON."""
    store = get_service().store
    data = store.export_json()
    if output is None:
        console.print_json(data)
        return
    output.write_text(data, encoding="utf-8")
    console.print(f"[green]✓ Progress exported to {output}[/]")


@app.command("import")
def import_progress(
    input_file: Annotated[Path, typer.Argument(help="File written by `libregto export`")],
) -> None:
    """Restore progress from an exported JSON file."""
    if not input_file.exists():
        _fail(f"File not found: {input_file}")

    store = get_service().store
    try:
        warnings = store.import_json(input_file.read_text(encoding="utf-8"))
    except PersistenceFailure as e:
        _fail(str(e))
    _print_warnings(warnings)
    console.print(f"[green]✓ Progress imported ({store.overall_progress()}% complete)[/]")


@app.command()
def reset(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Clear all progress."""
    if not yes and not Confirm.ask("[yellow]Erase all progress?[/yellow]", default=False):
        console.print("[dim]Nothing changed.[/]")
        return
    _print_warnings(get_service().store.reset())
    console.print("[green]✓ Progress reset[/]")


# =============================================================================
# Reference Commands
# =============================================================================


@app.command()
def hand(
    notation: Annotated[str, typer.Argument(help="Hand notation, e.g. AKs, 72o, TT")],
) -> None:
    """Canonical form, equity, tier and grid cell for a hand."""
    try:
        parsed = parse(notation)
    except InvalidNotation as e:
        _fail(str(e), code=2)

    row, col = grid_coord(parsed)
    tier = HAND_TIERS[hand_tier(parsed)]
    table = Table(title=parsed.notation)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Shape", parsed.shape.value)
    table.add_row("Combos", str(parsed.combos))
    table.add_row("Equity vs random", f"{equity_percent(parsed):.1f}%")
    table.add_row("Tier", f"{tier.name} - {tier.description}")
    table.add_row("Grid cell", f"row {row}, col {col}")
    table.add_row(
        "Opened from",
        ", ".join(p for p in POSITIONS if parsed.notation in opening_range(p).hands) or "nowhere",
    )
    console.print(table)


@app.command()
def classify(
    cards: Annotated[list[str], typer.Argument(help="Three flop cards, e.g. Kh 7d 2c")],
) -> None:
    """Classify a flop as dry, wet, paired or monotone."""
    try:
        texture = classify_board_texture(cards)
    except ValueError as e:
        _fail(str(e), code=2)

    console.print(f"[bold]{' '.join(cards)}[/] is [cyan]{texture.value.upper()}[/]")
    for note in TEXTURE_NOTES[texture]:
        console.print(f"  • {note}")


@app.command("range")
def show_range(
    position: Annotated[str, typer.Argument(help="UTG, MP, CO, BTN, SB or BB")],
) -> None:
    """Show a position's opening range as a 13x13 grid."""
    key = position.upper()
    if key not in POSITIONS:
        _fail(f"Unknown position: {position}", code=2)

    reference = opening_range(key)
    console.print(Panel(_grid_text(range_to_grid(reference)), title=f"{key} open", border_style="cyan"))
    console.print(
        f"{len(reference)} hands, {percentage_of_deck(reference):.1f}% of combos "
        f"(target ~{POSITIONS[key].opening_percent}%)"
    )


def _grid_text(grid: list[list[bool]]) -> str:
    lines = ["    " + " ".join(f"{r:>3}" for r in RANKS)]
    for row in range(GRID_SIZE):
        cells = []
        for col in range(GRID_SIZE):
            label = from_grid(row, col).notation
            cells.append(f"[green]{label:>3}[/]" if grid[row][col] else f"[dim]{label:>3}[/]")
        lines.append(f"{RANKS[row]:>3} " + " ".join(cells))
    return "\n".join(lines)


@app.command()
def build(
    position: Annotated[str, typer.Argument(help="Position to build for (BTN counts toward progress)")],
    hands: Annotated[list[str], typer.Argument(help="Hands in your range, e.g. AA KK AKs")],
) -> None:
    """Score a hand-built opening range against the reference."""
    key = position.upper()
    if key not in POSITIONS:
        _fail(f"Unknown position: {position}", code=2)

    service = get_service()
    try:
        result = service.build_range(hands, position=key)
    except InvalidNotation as e:
        _fail(str(e), code=2)
    except UnitLocked as e:
        _fail(str(e))

    colour = "green" if result.passed else "red"
    console.print(f"[{colour}]Similarity to {key}: {result.similarity:.1f}%[/]")
    if result.difference.missing:
        console.print(f"  [yellow]Missing:[/] {' '.join(result.difference.missing)}")
    if result.difference.extra:
        console.print(f"  [yellow]Extra:[/] {' '.join(result.difference.extra)}")
    if result.change is not None:
        _render_change(result.change)


# =============================================================================
# Entry Point
# =============================================================================


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Debug logging on stderr")
    ] = False,
) -> None:
    """
    ♠ libregto - poker strategy tutor

    \b
    Stages:
      foundations - hand strength, position, equity, ranges
      drills      - timed speed drills
      scenarios   - preflop decisions and board texture
    """
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level, settings.log_file)


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
