"""Developer CLI for the mentor backend.

Runs the API server and exercises the plan engine offline.
"""

import json
from pathlib import Path

import typer
import uvicorn
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.json import JSON
from rich.table import Table

from mentor.plans.preview import generate_deterministic_preview
from mentor.plans.profile import Injury, ProfileSnapshot
from mentor.plans.training import (
    apply_injury_substitutions,
    patch_deload,
    patch_progression,
    patch_set_days_per_week,
    patch_swap_exercise,
)

console = Console()

app = typer.Typer(
    name="mentor",
    help="Mentor backend CLI - server and offline plan engine",
    add_completion=False,
)


def _load_profile(profile_file: Path | None, overrides: dict) -> ProfileSnapshot:
    data = json.loads(profile_file.read_text()) if profile_file else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return ProfileSnapshot.model_validate(data)
    except ValidationError as e:
        console.print(f"[red]Invalid profile: {e.error_count()} error(s)[/red]")
        for error in e.errors():
            console.print(f"  {'.'.join(str(p) for p in error['loc'])}: {error['msg']}", markup=False)
        raise typer.Exit(code=1) from e


@app.command()
def server(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Run the FastAPI server."""
    logger.info(f"Starting FastAPI server on {host}:{port} (reload={reload})")
    uvicorn.run("mentor.main:app", host=host, port=port, reload=reload)


@app.command()
def preview(
    user_id: str = typer.Option("cli-user", "--user-id", "-u", help="User id to hash into the preview"),
    profile_file: Path | None = typer.Option(None, "--profile", help="JSON file with profile fields"),
    goal: str | None = typer.Option(None, "--goal", help="cut | maintain | gain"),
    level: str | None = typer.Option(None, "--level", help="beginner | intermediate | advanced"),
    weight: float | None = typer.Option(None, "--weight", help="Body weight in kg"),
    diet: str | None = typer.Option(None, "--diet", help="regular | vegan | vegetarian | keto | none"),
    injury: list[Injury] | None = typer.Option(None, "--injury", help="Injured body area (repeatable)"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Generate a plan preview from a profile and print it."""
    profile = _load_profile(
        profile_file,
        {
            "goal": goal,
            "experience_level": level,
            "body_weight_kg": weight,
            "diet": diet,
            "injuries": [i.value for i in injury] if injury else None,
        },
    )
    result = generate_deterministic_preview(user_id, profile)

    if as_json:
        console.print(JSON(result.model_dump_json(exclude_none=True)))
        return

    table = Table(title=f"Week preview ({result.hash[:12]})")
    table.add_column("Day")
    table.add_column("Focus")
    table.add_column("Exercises")
    for day in result.training_week:
        exercises = "\n".join(f"{e.name} {e.sets}x{e.reps}" + (f" @ {e.rpe}" if e.rpe else "") for e in day.exercises or [])
        table.add_row(day.day, day.focus, exercises or "-")
    console.print(table)

    n = result.nutrition
    console.print(f"[bold]{n.kcal} kcal[/bold] | P {n.protein_grams}g | C {n.carbs_grams}g | F {n.fat_grams}g")
    if n.rationale:
        console.print(n.rationale)


@app.command()
def patch(
    rule: str = typer.Argument(..., help="progression | deload | days | swap | injuries"),
    profile_file: Path | None = typer.Option(None, "--profile", help="JSON file with profile fields"),
    level: str | None = typer.Option(None, "--level", help="Experience level used to build the week"),
    days_per_week: int = typer.Option(3, "--days", help="Target days/week (rule=days)"),
    day: str = typer.Option("Mon", "--day", help="Day to swap on (rule=swap)"),
    from_name: str = typer.Option("Back Squat", "--from", help="Exercise to replace (rule=swap)"),
    to_name: str = typer.Option("Leg Press", "--to", help="Replacement exercise (rule=swap)"),
    injury: list[Injury] | None = typer.Option(None, "--injury", help="Injured body area (rule=injuries)"),
) -> None:
    """Run a training patch rule against a generated week and print the patch."""
    profile = _load_profile(profile_file, {"experience_level": level})
    days = generate_deterministic_preview("cli-user", profile).training_week

    if rule == "progression":
        result = patch_progression(days)
    elif rule == "deload":
        result = patch_deload(days)
    elif rule == "days":
        result = patch_set_days_per_week(days, days_per_week)
    elif rule == "swap":
        result = patch_swap_exercise(days, day, from_name, to_name)
    elif rule == "injuries":
        result = apply_injury_substitutions(days, injury or [])
    else:
        console.print(f"[red]Unknown rule: {rule}[/red]")
        raise typer.Exit(code=1)

    if result is None:
        console.print("[yellow]Nothing to patch[/yellow]")
        return
    console.print(JSON(result.model_dump_json(exclude_none=True)))


if __name__ == "__main__":
    app()
