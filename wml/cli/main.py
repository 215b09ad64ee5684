"""
Typer CLI for the WML adaptive engine.

Commands:
    wml quiz LEARNER SCORE      - Record a completed quiz and show the decision
    wml show LEARNER            - Show a learner's performance record
    wml learners                - List learners with stored records
    wml reset LEARNER           - Delete a learner's record
    wml prompt LEARNER TOPIC    - Print the adaptive course-generation prompt
    wml recommend LEARNER       - Suggest next course topics

Usage:
    wml quiz ada 92 --modality visual --topic fractions --streak 4 --completion 0.5
    wml show ada --json
    WML_STORE_DIR=/tmp/wml wml learners
"""

from __future__ import annotations

import json
import sys
from typing import List, NoReturn, Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import get_settings
from wml.adaptive.engine import AdaptiveEngine
from wml.adaptive.models import ChangeDirection, Modality, PerformanceHistory
from wml.adaptive.workflow import QuizCompletionService
from wml.errors import WmlError
from wml.generation.profile import LearningProfile
from wml.generation.prompts import build_adaptive_course_prompt
from wml.generation.recommendations import recommend_topics
from wml.store.json_store import JsonPerformanceStore

app = typer.Typer(
    help="WML adaptive engine: quiz-driven difficulty and tier tracking",
    no_args_is_help=True,
)

console = Console()

DIRECTION_ARROWS = {
    ChangeDirection.UP: "[green]▲ up[/green]",
    ChangeDirection.DOWN: "[red]▼ down[/red]",
    ChangeDirection.STABLE: "[dim]= stable[/dim]",
}


def _service() -> QuizCompletionService:
    settings = get_settings()
    store = JsonPerformanceStore(settings.store_dir)
    return QuizCompletionService(store, AdaptiveEngine(settings.get_engine_config()))


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code=1)


def _profile(**fields) -> LearningProfile:
    try:
        return LearningProfile(**fields)
    except ValidationError as e:
        problems = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        _fail(f"Invalid learner profile: {problems}")


def _standing_table(history: PerformanceHistory) -> Table:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Difficulty", history.current_difficulty.display_name)
    table.add_row(
        "Tier",
        f"[{history.learner_tier.color}]{history.learner_tier.display_name}[/] "
        f"(score {history.tier_score:.1f})",
    )
    table.add_row("Trend", history.trend.value)
    table.add_row("Streak health", f"[{history.streak_health.color}]{history.streak_health.value}[/]")
    table.add_row("Last change", DIRECTION_ARROWS[history.last_difficulty_change_direction])
    table.add_row("Average score", f"{history.average_quiz_score:.1f}%")
    table.add_row("Lessons completed", str(history.total_lessons_completed))
    table.add_row("Recent scores", ", ".join(f"{s:.0f}" for s in history.recent_quiz_scores) or "-")
    table.add_row(
        "Modalities",
        "  ".join(f"{m.value} {v:.0f}" for m, v in history.modality_scores.as_dict().items()),
    )
    table.add_row("Strong topics", ", ".join(history.strong_topics) or "-")
    table.add_row("Weak topics", ", ".join(history.weak_topics) or "-")
    if history.last_updated:
        table.add_row("Last updated", history.last_updated.isoformat(timespec="seconds"))
    return table


@app.command()
def quiz(
    learner: str = typer.Argument(..., help="Learner id"),
    score: float = typer.Argument(..., help="Quiz score percentage (clamped to 0-100)"),
    modality: Modality = typer.Option(Modality.READING, "--modality", "-m", help="Lesson modality"),
    topic: str = typer.Option("", "--topic", "-t", help="Lesson topic label"),
    streak: int = typer.Option(0, "--streak", "-s", help="Current engagement streak in days"),
    completion: float = typer.Option(0.0, "--completion", "-c", help="Course completion ratio (0-1)"),
) -> None:
    """Record a completed quiz and show the updated standing."""
    try:
        outcome = _service().record_quiz(
            learner,
            score,
            modality,
            topic,
            {"current_streak": streak, "completion_ratio": completion},
        )
    except WmlError as e:
        _fail(str(e))

    updated = outcome.updated
    console.print(_standing_table(updated))
    console.print(
        Panel(
            updated.difficulty_change_reason,
            title=f"Difficulty {DIRECTION_ARROWS[updated.last_difficulty_change_direction]}",
            border_style="cyan",
        )
    )
    if outcome.tier_changed:
        console.print(
            f"[bold]Tier changed:[/bold] {outcome.previous.learner_tier.display_name} -> "
            f"{updated.learner_tier.display_name}"
        )


@app.command()
def show(
    learner: str = typer.Argument(..., help="Learner id"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw stored document"),
) -> None:
    """Show a learner's performance record (defaults if none is stored)."""
    try:
        history = _service().get_history(learner)
    except WmlError as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps(history.to_document(), indent=2))
        return
    console.print(Panel(_standing_table(history), title=f"[bold]{learner}[/bold]", border_style="blue"))
    console.print(f"[dim]{history.difficulty_change_reason}[/dim]")


@app.command()
def learners() -> None:
    """List learners with stored records."""
    try:
        service = _service()
        ids = service.store.list_learners()
    except WmlError as e:
        _fail(str(e))

    if not ids:
        console.print("[dim]No learners recorded yet.[/dim]")
        return

    table = Table(title="Learners", box=box.ROUNDED)
    table.add_column("Learner", style="bold")
    table.add_column("Difficulty")
    table.add_column("Tier")
    table.add_column("Lessons", justify="right")
    table.add_column("Average", justify="right")
    for learner_id in ids:
        history = service.get_history(learner_id)
        table.add_row(
            learner_id,
            history.current_difficulty.display_name,
            history.learner_tier.display_name,
            str(history.total_lessons_completed),
            f"{history.average_quiz_score:.1f}%",
        )
    console.print(table)


@app.command()
def reset(
    learner: str = typer.Argument(..., help="Learner id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a learner's performance record."""
    if not yes and not typer.confirm(f"Delete performance record for {learner}?"):
        raise typer.Abort()
    try:
        removed = _service().reset(learner)
    except WmlError as e:
        _fail(str(e))
    if removed:
        console.print(f"[green]Deleted record for {learner}[/green]")
    else:
        console.print(f"[yellow]No record stored for {learner}[/yellow]")


@app.command()
def prompt(
    learner: str = typer.Argument(..., help="Learner id"),
    topic: str = typer.Argument(..., help="Course topic"),
    age: int = typer.Option(10, "--age", help="Learner age"),
    grade: str = typer.Option("Grade 5", "--grade", help="Grade level"),
    country: str = typer.Option("", "--country", help="Country"),
    language: str = typer.Option("English", "--language", help="Course language"),
    style: Optional[List[Modality]] = typer.Option(None, "--style", help="Preferred modality (repeatable)"),
) -> None:
    """Print the adaptive course-generation prompt for a learner."""
    try:
        history = _service().get_history(learner)
    except WmlError as e:
        _fail(str(e))
    profile = _profile(
        age=age,
        grade_level=grade,
        country=country,
        language=language,
        learning_styles=style or [],
    )
    typer.echo(build_adaptive_course_prompt(profile, history, topic))


@app.command()
def recommend(
    learner: str = typer.Argument(..., help="Learner id"),
    interest: Optional[List[str]] = typer.Option(None, "--interest", "-i", help="Interest category (repeatable)"),
    completed: Optional[List[str]] = typer.Option(None, "--completed", help="Completed course title (repeatable)"),
) -> None:
    """Suggest next course topics."""
    try:
        history = _service().get_history(learner)
    except WmlError as e:
        _fail(str(e))

    suggestions = recommend_topics(_profile(interests=interest or []), history, completed or [])
    table = Table(title=f"Recommended for {learner}", box=box.ROUNDED)
    table.add_column("", width=2)
    table.add_column("Topic", style="bold")
    table.add_column("Category")
    table.add_column("Why")
    for rec in suggestions:
        table.add_row(rec.icon, rec.topic, rec.category.value, rec.reason)
    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level,
        format="<level>{level: <8}</level> | {message}",
    )

    app()


if __name__ == "__main__":
    main()
