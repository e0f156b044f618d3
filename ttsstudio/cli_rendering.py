"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
catalog listings, the current selection, synthesis results, and history rows.
"""

from __future__ import annotations

from typing import NoReturn, Sequence

import typer

from .errors import StudioStageError
from .models.datatypes import HistoryEntry, Language, Selection, SynthesisResult, Voice

EXPIRY_NOTICE = "Pre-signed links expire automatically."


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, StudioStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_advisory(message: str) -> None:
    """Print a non-fatal advisory (for example the catalog fallback notice)."""

    if message:
        typer.secho(message, fg=typer.colors.YELLOW, err=True)


def echo_languages(languages: Sequence[Language]) -> None:
    """Print display-ordered language rows."""

    for language in languages:
        typer.echo(f"{language.name} ({language.code})")


def echo_voices(voices: Sequence[Voice]) -> None:
    """Print one row per voice with its gender and supported engines."""

    for voice in voices:
        engines = ", ".join(sorted(voice.supported_engines)) or "standard"
        gender = f" [{voice.gender}]" if voice.gender else ""
        language = f"{voice.language_name} ({voice.language_code})"
        typer.echo(f"{voice.id}{gender} - {language} - {engines}")


def echo_selection(selection: Selection) -> None:
    """Print the current language, voice, and engine choice."""

    typer.echo(
        f"Language: {selection.language_code or '(none)'} | "
        f"Voice: {selection.voice_id or '(none)'} | "
        f"Engine: {selection.engine or 'standard'}"
    )


def format_char_count(text: str, max_chars: int) -> str:
    """Return the `n / max characters` counter, flagging over-length text."""

    counter = f"{len(text)} / {max_chars} characters"
    if len(text) > max_chars:
        return f"{counter} (too long)"
    return counter


def format_engine_options(options: Sequence[str]) -> str:
    """Return the engines offered for the selected voice, standard first."""

    return "Engines: " + ", ".join(option or "standard" for option in options)


def echo_result(result: SynthesisResult) -> None:
    """Print the audio URL of a synthesis result and the expiry notice."""

    typer.echo(f"Audio URL: {result.url}")
    typer.echo(EXPIRY_NOTICE)


def format_history_row(entry: HistoryEntry) -> str:
    """Format one history row: voice, language, optional engine, and local time."""

    parts = [entry.voice_id, entry.language_code or "(any)"]
    if entry.engine:
        parts.append(entry.engine)
    parts.append(entry.recorded_at.astimezone().strftime("%H:%M:%S"))
    return " · ".join(parts)


def echo_history(entries: Sequence[HistoryEntry]) -> None:
    """Print recent clips newest-first, or a hint when there are none."""

    if not entries:
        typer.echo("No clips yet - generate one!")
        return
    for index, entry in enumerate(entries, start=1):
        typer.echo(f"{index}. {format_history_row(entry)}")
        typer.echo(f"   {entry.url}")
