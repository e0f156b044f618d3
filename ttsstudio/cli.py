"""Command-line interface for TTS Studio.

Responsibilities:
- Expose user-facing commands for browsing voices and synthesizing text.
- Convert CLI arguments into `StudioConfig` and drive a `StudioSession`.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_advisory,
    echo_history,
    echo_languages,
    echo_result,
    echo_selection,
    echo_voices,
    exit_with_command_error,
    format_char_count,
    format_engine_options,
)
from .config import API_BASE_ENV, ConfigLoader, StudioConfig
from .errors import StudioServiceError, StudioStageError
from .session import StudioSession
from .telemetry.logger import StudioLogger

app = typer.Typer(
    name="ttsstudio",
    no_args_is_help=True,
    help="TTS Studio CLI.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with studio settings."),
]
ApiBaseOption = Annotated[
    str | None,
    typer.Option("--api-base", help=f"Speech service base URL (overrides `{API_BASE_ENV}`)."),
]

_STUDIO_HELP = """Commands:
  /langs            list languages
  /lang CODE        select a language
  /voices           list voices of the selected language
  /voice ID         select a voice
  /engine [NAME]    list engines, or select `standard` or `neural`
  /sample           synthesize sample text for the selected language
  /history          show recent clips
  /clear            clear the current result and error
  /status           show selection, result, and error
  /quit             leave the studio
Any other line is synthesized with the current selection."""


def _resolve_config(config_file: Path | None, api_base: str | None) -> StudioConfig:
    """Resolve settings: `--api-base` > YAML file > environment > defaults."""

    try:
        config = ConfigLoader.from_env()
    except ValueError as exc:
        raise StudioStageError(
            stage="config",
            detail=f"Invalid environment configuration: {exc}",
            hint="Fix or unset the `TTSSTUDIO_*` environment variables and rerun.",
        ) from exc

    if config_file is not None:
        try:
            config = ConfigLoader.from_yaml(config_file, defaults=config)
        except FileNotFoundError as exc:
            raise StudioStageError(
                stage="config",
                detail=f"Config file not found: `{config_file}`.",
                hint="Provide an existing path via `--config <path.yaml>`.",
            ) from exc
        except ValueError as exc:
            raise StudioStageError(
                stage="config",
                detail=f"Invalid config file `{config_file}`: {exc}",
                hint="Fix config schema/values and rerun.",
            ) from exc

    try:
        return config.with_api_base(api_base)
    except ValueError as exc:
        raise StudioStageError(
            stage="config",
            detail=f"Invalid `--api-base` value: {exc}",
            hint="Pass an absolute URL such as `https://api.example.com/prod`.",
        ) from exc


def _open_session(config_file: Path | None, api_base: str | None) -> StudioSession:
    """Build a session and load its catalog, printing any fallback advisory."""

    session = StudioSession(_resolve_config(config_file, api_base), logger=StudioLogger())
    session.load_catalog()
    echo_advisory(session.error_message)
    return session


def _require_language(session: StudioSession, language: str) -> None:
    codes = {item.code for item in session.languages}
    if language not in codes:
        raise StudioStageError(
            stage="selection",
            detail=f"Unknown language `{language}`.",
            hint="Run `ttsstudio voices` to list available languages.",
        )
    session.set_language(language)


def _validation_detail(session: StudioSession, text: str) -> str:
    """Explain why `text` cannot be submitted with the current selection."""

    if not text.strip():
        return "Text is empty."
    if len(text) > session.max_chars:
        return f"Text is too long: {format_char_count(text, session.max_chars)}."
    if not session.selection.has_voice:
        return "No voice is selected for this language."
    return "Submission is not allowed right now."


def _synthesize_line(session: StudioSession, text: str) -> None:
    """Submit one line in the interactive studio and print the outcome."""

    typer.echo(format_char_count(text, session.max_chars))
    if not session.can_submit(text):
        typer.secho(_validation_detail(session, text), fg=typer.colors.YELLOW)
        return
    result = session.submit(text)
    if result is None:
        typer.secho(session.error_message, fg=typer.colors.RED)
        return
    echo_result(result)


def handle_studio_line(session: StudioSession, line: str) -> bool:
    """Apply one interactive studio line; returns `False` when the loop should stop."""

    stripped = line.strip()
    if not stripped:
        return True
    if not stripped.startswith("/"):
        _synthesize_line(session, line)
        return True

    command, _, argument = stripped.partition(" ")
    argument = argument.strip()
    if command in {"/quit", "/exit"}:
        return False
    if command == "/help":
        typer.echo(_STUDIO_HELP)
    elif command == "/langs":
        echo_languages(session.languages)
    elif command == "/lang":
        if argument not in {item.code for item in session.languages}:
            typer.secho(f"Unknown language `{argument}`.", fg=typer.colors.YELLOW)
        else:
            session.set_language(argument)
            echo_selection(session.selection)
    elif command == "/voices":
        echo_voices(session.filtered_voices)
    elif command == "/voice":
        if not session.set_voice(argument):
            typer.secho(
                f"Voice `{argument}` is not available for {session.selection.language_code}.",
                fg=typer.colors.YELLOW,
            )
        echo_selection(session.selection)
    elif command == "/engine" and not argument:
        typer.echo(format_engine_options(session.engine_options))
    elif command == "/engine":
        if not session.set_engine(argument):
            typer.secho(
                f"Engine `{argument}` is not supported by the selected voice.",
                fg=typer.colors.YELLOW,
            )
        echo_selection(session.selection)
    elif command == "/sample":
        sample = session.sample_text()
        typer.echo(sample)
        _synthesize_line(session, sample)
    elif command == "/history":
        echo_history(session.history)
    elif command == "/clear":
        session.clear()
        typer.echo("Cleared.")
    elif command == "/status":
        echo_selection(session.selection)
        if session.current_result is not None:
            echo_result(session.current_result)
        if session.error_message:
            typer.secho(session.error_message, fg=typer.colors.RED)
    else:
        typer.secho(f"Unknown command `{command}`. Type /help.", fg=typer.colors.YELLOW)
    return True


@app.command("voices")
def voices_command(
    language: Annotated[
        str | None,
        typer.Option("--language", help="List the voices of one language code."),
    ] = None,
    config_file: ConfigOption = None,
    api_base: ApiBaseOption = None,
) -> None:
    """List languages, or the voices of one language."""

    try:
        session = _open_session(config_file, api_base)
        if language is not None:
            _require_language(session, language)
    except Exception as exc:
        exit_with_command_error("voices", exc)

    if language is None:
        echo_languages(session.languages)
    else:
        echo_voices(session.filtered_voices)


@app.command("synthesize")
def synthesize_command(
    text: Annotated[str, typer.Argument(help="Text to synthesize.")],
    language: Annotated[
        str | None, typer.Option("--language", help="Language code (default: first `en-`).")
    ] = None,
    voice: Annotated[
        str | None, typer.Option("--voice", help="Voice id within the selected language.")
    ] = None,
    engine: Annotated[
        str | None, typer.Option("--engine", help="`standard` or `neural`.")
    ] = None,
    download: Annotated[
        Path | None,
        typer.Option("--download", help="Save the generated audio to this path (e.g. `tts.mp3`)."),
    ] = None,
    config_file: ConfigOption = None,
    api_base: ApiBaseOption = None,
) -> None:
    """Synthesize one text and print the pre-signed audio URL."""

    try:
        session = _open_session(config_file, api_base)
        if language is not None:
            _require_language(session, language)
        if voice is not None and not session.set_voice(voice):
            raise StudioStageError(
                stage="selection",
                detail=(
                    f"Voice `{voice}` is not available for "
                    f"`{session.selection.language_code}`."
                ),
                hint="Run `ttsstudio voices --language <code>` to list voices.",
            )
        if engine is not None and not session.set_engine(engine):
            raise StudioStageError(
                stage="selection",
                detail=(
                    f"Engine `{engine}` is not supported by voice "
                    f"`{session.selection.voice_id}`."
                ),
                hint="Use `--engine standard` or pick a voice that supports `neural`.",
            )
        if not session.can_submit(text):
            raise StudioStageError(
                stage="validation",
                detail=_validation_detail(session, text),
                hint=f"Provide 1 to {session.max_chars} characters of non-blank text.",
            )
        result = session.submit(text)
        if result is None:
            raise StudioStageError(stage="synthesize", detail=session.error_message)
        saved_path = None
        if download is not None:
            saved_path = session.client.download_audio(result.url, download)
    except StudioServiceError as exc:
        exit_with_command_error(
            "synthesize",
            StudioStageError(stage="download", detail=str(exc), hint="Rerun to get a fresh link."),
        )
    except Exception as exc:
        exit_with_command_error("synthesize", exc)

    echo_selection(session.selection)
    echo_result(result)
    if saved_path is not None:
        typer.echo(f"Saved audio: {saved_path}")


@app.command("studio")
def studio_command(
    config_file: ConfigOption = None,
    api_base: ApiBaseOption = None,
) -> None:
    """Run an interactive studio session with in-memory history."""

    try:
        session = _open_session(config_file, api_base)
    except Exception as exc:
        exit_with_command_error("studio", exc)

    echo_selection(session.selection)
    typer.echo("Type /help for commands.")
    while True:
        try:
            line = typer.prompt("studio", default="", show_default=False)
        except typer.Abort:
            break
        if not handle_studio_line(session, line):
            break


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
