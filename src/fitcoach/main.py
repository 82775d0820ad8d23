"""
FitCoach - CLI Entry Point.

Usage:
    fitcoach onboard         Walk through onboarding in the terminal
    fitcoach serve           Start the web API
    fitcoach health          Check configuration
    fitcoach --help          Show help
"""

import asyncio

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner

app = typer.Typer(
    name="fitcoach",
    help="FitCoach - personal fitness and nutrition coaching.",
    add_completion=False,
)
console = Console()


# =============================================================================
# Terminal wizard helpers
# =============================================================================


def _ask_choice(label: str, options: list[dict], current: str | None) -> str | None:
    """Numbered single choice. Enter keeps the current value."""
    console.print(f"\n[bold]{label}[/bold]")
    for i, option in enumerate(options, 1):
        marker = "●" if option["id"] == current else "○"
        desc = f" [dim]- {option['description']}[/dim]" if option.get("description") else ""
        console.print(f"  {i}. {marker} {option['label']}{desc}")
    raw = console.input("[dim]Number (Enter to keep):[/dim] ").strip()
    if not raw:
        return current
    if raw.isdigit() and 1 <= int(raw) <= len(options):
        return options[int(raw) - 1]["id"]
    console.print("[yellow]Not a valid choice, keeping current value.[/yellow]")
    return current


def _ask_text(label: str, current: str) -> str:
    shown = f" [dim]({current})[/dim]" if current else ""
    raw = console.input(f"[bold]{label}[/bold]{shown}: ").strip()
    return raw or current


def _ask_toggles(wizard, field: str, label: str, options: list[dict]) -> None:
    """Comma-separated numbers toggle tags on/off."""
    selected = getattr(wizard.answers, field)
    console.print(f"\n[bold]{label}[/bold] [dim](toggle with numbers, e.g. 1,3)[/dim]")
    for i, option in enumerate(options, 1):
        marker = "☑" if option["id"] in selected else "☐"
        console.print(f"  {i}. {marker} {option['label']} [dim]- {option['description']}[/dim]")
    raw = console.input("[dim]Toggle (Enter to keep):[/dim] ").strip()
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit() and 1 <= int(part) <= len(options):
            wizard.toggle_multi_value(field, options[int(part) - 1]["id"])


def _ask_step(wizard) -> None:
    """Prompt for every field of the current step."""
    from onboarding.forms import get_form_options

    answers = wizard.answers
    options = get_form_options(answers.language)
    sv = answers.language == "sv"
    step = wizard.step

    if step == 1:
        wizard.set_field("language", _ask_choice("Språk / Language", options["languages"], answers.language))
    elif step == 2:
        wizard.set_field("gender", _ask_choice("Kön" if sv else "Gender", options["genders"], answers.gender))
        wizard.set_field("age", _ask_text("Ålder" if sv else "Age", answers.age))
    elif step == 3:
        wizard.set_field("weight", _ask_text("Vikt (kg)" if sv else "Weight (kg)", answers.weight))
        wizard.set_field("height", _ask_text("Längd (cm)" if sv else "Height (cm)", answers.height))
    elif step == 4:
        console.print(f"[dim]{', '.join(options['countries'])}[/dim]")
        wizard.set_field("country", _ask_text("Land" if sv else "Country", answers.country))
        wizard.set_field("address", _ask_text("Adress" if sv else "Address", answers.address))
    elif step == 5:
        _ask_toggles(wizard, "goals", "Mål" if sv else "Goals", options["goals"])
    elif step == 6:
        _ask_toggles(wizard, "workout_types", "Träningsformer" if sv else "Workout types", options["workout_types"])
    elif step == 7:
        wizard.set_field(
            "preferences",
            _ask_choice("Vad vill du ha?" if sv else "What do you want?", options["preferences"], answers.preferences),
        )
        wizard.set_field("allergies", _ask_text("Allergier (valfritt)" if sv else "Allergies (optional)", answers.allergies))


def _run_wizard(wizard, store) -> None:
    """Step loop of the terminal wizard. Returns when done or quit."""
    from onboarding.errors import InvalidFieldUpdate
    from onboarding.payload import get_profile_summary
    from onboarding.state import TOTAL_STEPS

    while True:
        step, total, percent = wizard.progress()
        title = wizard.snapshot()["title"]
        console.print(f"\n[bold blue]Step {step} of {total}[/bold blue] [dim]({percent}%)[/dim] - {title}")

        try:
            _ask_step(wizard)
        except InvalidFieldUpdate as e:
            console.print(f"[red]{e.message}[/red]")
            continue

        can_go = wizard.can_complete() if step == TOTAL_STEPS else wizard.can_advance()
        forward = "c = complete" if step == TOTAL_STEPS else "n = next"
        if not can_go:
            missing = ", ".join(wizard.missing_fields())
            forward = f"[dim]{forward} (missing: {missing})[/dim]"
        back = "b = back" if step > 1 else "[dim]b = back[/dim]"

        choice = console.input(f"\n{forward}  {back}  q = quit  [dim](Enter to edit again)[/dim] ").strip().lower()

        if choice in ("q", "quit", "exit"):
            console.print("\n[dim]Onboarding cancelled. Nothing was saved.[/dim]")
            return
        if choice == "b":
            wizard.go_previous()
        elif choice == "n" and step < TOTAL_STEPS and can_go:
            wizard.go_next()
        elif choice == "c" and step == TOTAL_STEPS and can_go:
            with Live(Spinner("dots", text="Creating your plan..."), console=console, transient=True):
                saved = asyncio.run(wizard.complete())
            if saved:
                profile = store.latest()
                console.print(f"\n[bold green]Done![/bold green] {get_profile_summary(profile)}")
                console.print(f"[dim]Continue at {wizard.destination}[/dim]")
                return
            console.print(f"\n[red]Could not save your profile: {wizard.last_error}[/red]")
            console.print("[dim]Your answers are kept - try again.[/dim]")


# =============================================================================
# Commands
# =============================================================================


@app.command()
def onboard() -> None:
    """Walk through the onboarding wizard in the terminal."""
    from fitcoach.config import settings
    from fitcoach.logging_setup import configure_logging
    from onboarding.profiles import InMemoryProfileStore
    from onboarding.wizard import OnboardingWizard

    configure_logging()

    store = InMemoryProfileStore(delay_seconds=settings.profile_save_delay_seconds)
    wizard = OnboardingWizard.from_settings(saver=store)

    console.print(
        Panel.fit(
            "[bold green]FitCoach[/bold green]\n"
            "Let's set up your personal plan.\n\n"
            "[dim]Type 'q' at the navigation prompt to quit.[/dim]",
            title="Welcome",
            border_style="green",
        )
    )

    try:
        _run_wizard(wizard, store)
    except KeyboardInterrupt:
        console.print("\n\n[dim]Onboarding interrupted. Nothing was saved.[/dim]")
        raise typer.Exit(1)


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the web API server."""
    import os

    import uvicorn

    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]FitCoach API[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "fitcoach.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


@app.command()
def health() -> None:
    """Check configuration."""
    from fitcoach.config import get_settings

    console.print("\n[bold]FitCoach Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("[green]OK[/green] Configuration loaded")
        console.print(f"   Environment: {settings.fitcoach_env}")
        console.print(f"   Log level: {settings.log_level}")
        console.print(f"   Default language: {settings.default_language}")
        mode = "enforced" if settings.onboarding_enforce_step_rules else "advisory (UI-gated)"
        console.print(f"   Onboarding step rules: {mode}")
        console.print("\n[green]All checks passed![/green]")

    except Exception as e:
        console.print(f"\n[red]FAIL Configuration error: {e}[/red]")
        console.print("[dim]Check your .env file / environment variables.[/dim]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from fitcoach import __version__

    console.print(f"FitCoach version {__version__}")


if __name__ == "__main__":
    app()
