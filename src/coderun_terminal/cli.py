"""CLI entry point using typer."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from coderun_terminal import __version__
from coderun_terminal.config import (
    CONFIG_FILE,
    AppConfig,
    LoggingConfig,
    ServiceConfig,
    SessionConfig,
    get_config,
    load_config,
    save_config,
)
from coderun_terminal.errors import InvalidLanguageError
from coderun_terminal.languages import get_language, get_template, is_supported, language_for_path, list_languages
from coderun_terminal.models import SessionState, is_failure
from coderun_terminal.session import CodeSession
from coderun_terminal.utils.formatting import (
    format_duration,
    format_review,
    format_status,
    result_style,
    result_text,
)
from coderun_terminal.utils.system import check_clipboard, check_service

app = typer.Typer(
    name="coderun-terminal",
    help="Run and review code on a remote execution service.",
    add_completion=False,
)
console = Console()

SESSION_HELP = """\
Commands:
  lang <id>       Switch language (resets the source to its template)
  edit            Edit the source in $EDITOR
  stdin [text]    Set program input (opens $EDITOR without text)
  load <file>     Load source from a file
  save <file>     Save source to a file
  show            Print the current source
  run             Run the source (in the background)
  review          Request an AI review (in the background)
  copy            Copy the source to the clipboard
  status          Show session status
  wait            Wait for pending run/review requests
  help            This help
  quit            Leave the session"""


def _setup_logging(config: AppConfig, verbose: bool = False) -> None:
    log_path = Path(config.logging.file).expanduser().resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    level = logging.DEBUG if verbose else getattr(logging, config.logging.level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(str(log_path)),
            *([logging.StreamHandler()] if verbose else []),
        ],
    )


def _resolve_language(lang: str | None, file: Path | None, config: AppConfig) -> str:
    language = lang or (language_for_path(file) if file else None) or config.session.default_language
    if not is_supported(language):
        available = ", ".join(lang_cfg.id for lang_cfg in list_languages())
        console.print(f"[red]Unsupported language '{language}'. Choose one of: {available}[/red]")
        raise typer.Exit(1)
    return language


def _print_output(state: SessionState) -> None:
    result = state.last_output
    if result is None:
        console.print("[dim]Run result discarded (language changed while running).[/dim]")
        return
    title = "Output"
    if state.last_execution_latency_ms is not None:
        title += f" ({format_duration(state.last_execution_latency_ms)})"
    body = result_text(result) or "(no output)"
    console.print(Panel(Text(body), title=title, border_style=result_style(result)))


def _print_review(state: SessionState) -> None:
    result = state.last_review
    if result is None:
        console.print("[dim]Review result discarded (language changed while reviewing).[/dim]")
        return
    console.print(Panel(Text(format_review(result)), title="AI Review", border_style=result_style(result)))


def _print_source(state: SessionState) -> None:
    lang = get_language(state.language)
    lines = state.source_text.splitlines() or [""]
    width = len(str(len(lines)))
    numbered = "\n".join(f"{i:>{width}} | {line}" for i, line in enumerate(lines, 1))
    console.print(Panel(Text(numbered), title=f"{lang.name} source"))


@app.command()
def init() -> None:
    """Interactive setup wizard."""
    console.print(f"\n[bold]coderun-terminal v{__version__}[/bold]")
    console.print("Interactive Setup\n")

    # 1. Service URL
    console.print("[bold]Step 1:[/bold] Execution service")
    base_url = typer.prompt("  Base URL", default=ServiceConfig().base_url)
    timeout = typer.prompt("  Request timeout (seconds)", default=ServiceConfig().timeout, type=int)
    if timeout <= 0:
        console.print("[red]Timeout must be a positive number of seconds.[/red]")
        raise typer.Exit(1)

    config = AppConfig(
        service=ServiceConfig(base_url=base_url, timeout=timeout),
        session=SessionConfig(),
        logging=LoggingConfig(),
    )

    console.print("[dim]Checking service...[/dim]")
    reachable, info = check_service(config)
    if reachable:
        console.print(f"  Service: [green]{info}[/green]")
    else:
        console.print(f"  [yellow]Warning: {info}[/yellow]")
        console.print("  You can still save the configuration; runs will fail until the service is up.\n")

    # 2. Default language
    console.print("\n[bold]Step 2:[/bold] Default language")
    available = ", ".join(lang.id for lang in list_languages())
    default_language = typer.prompt(f"  Language ({available})", default=SessionConfig().default_language)
    if not is_supported(default_language):
        console.print(f"[yellow]Unknown language '{default_language}', using 'cpp'.[/yellow]")
        default_language = "cpp"
    config.session.default_language = default_language

    save_config(config)

    console.print(f"\n[green]Configuration saved to {CONFIG_FILE}[/green]")
    console.print("\nNext steps:")
    console.print("  [bold]coderun-terminal session[/bold]          Start an interactive session")
    console.print("  [bold]coderun-terminal run main.py[/bold]      Run a file once\n")


@app.command()
def config(
    key: str = typer.Argument(None, help="Config key (e.g., service.timeout)"),
    value: str = typer.Argument(None, help="New value"),
) -> None:
    """View or modify configuration."""
    if not CONFIG_FILE.exists():
        console.print("[red]Not configured. Run 'coderun-terminal init'.[/red]")
        raise typer.Exit(1)

    cfg = load_config()

    if key is None:
        table = Table(title="Configuration")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("service.base_url", cfg.service.base_url)
        table.add_row("service.timeout", str(cfg.service.timeout))
        table.add_row("service.run_path", cfg.service.run_path)
        table.add_row("service.review_path", cfg.service.review_path)
        table.add_row("session.default_language", cfg.session.default_language)
        table.add_row("session.copy_ack_seconds", str(cfg.session.copy_ack_seconds))
        table.add_row("session.discard_stale_results", str(cfg.session.discard_stale_results))
        table.add_row("logging.level", cfg.logging.level)
        table.add_row("logging.file", cfg.logging.file)

        console.print(table)
        return

    if value is None:
        console.print("[red]Usage: coderun-terminal config <key> <value>[/red]")
        raise typer.Exit(1)

    parts = key.split(".")
    if len(parts) != 2:
        console.print("[red]Key format: section.key (e.g., service.timeout)[/red]")
        raise typer.Exit(1)

    section, attr = parts
    section_map = {"service": cfg.service, "session": cfg.session, "logging": cfg.logging}

    if section not in section_map:
        console.print(f"[red]Unknown section: {section}[/red]")
        raise typer.Exit(1)

    obj = section_map[section]
    if not hasattr(obj, attr):
        console.print(f"[red]Unknown key: {key}[/red]")
        raise typer.Exit(1)

    # Type coercion
    current = getattr(obj, attr)
    try:
        if isinstance(current, bool):
            typed_value = value.lower() in ("true", "1", "yes")
        elif isinstance(current, int):
            typed_value = int(value)
        elif isinstance(current, float):
            typed_value = float(value)
        else:
            typed_value = value
    except ValueError:
        console.print(f"[red]Invalid value type for {key}[/red]")
        raise typer.Exit(1)

    if key == "session.default_language" and not is_supported(typed_value):
        console.print(f"[red]Unsupported language: {typed_value}[/red]")
        raise typer.Exit(1)

    setattr(obj, attr, typed_value)
    save_config(cfg)
    console.print(f"[green]{key} = {typed_value}[/green]")


@app.command()
def languages() -> None:
    """List supported languages."""
    table = Table(title="Languages")
    table.add_column("Id", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Extension")
    for lang in list_languages():
        table.add_row(lang.id, lang.name, lang.extension)
    console.print(table)


@app.command()
def template(
    lang: str = typer.Argument(..., help="Language id"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the template to a file"),
) -> None:
    """Print the starter template for a language."""
    try:
        text = get_template(lang)
    except InvalidLanguageError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if output is None:
        console.print(Text(text))
        return
    output.write_text(text + "\n")
    console.print(f"[green]Template written to {output}[/green]")


@app.command()
def run(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file"),
    lang: str = typer.Option(None, "--lang", "-l", help="Language id (default: from file extension)"),
    stdin: str = typer.Option("", "--stdin", "-i", help="Program input"),
    stdin_file: Path = typer.Option(None, "--stdin-file", exists=True, dir_okay=False, help="Read program input from a file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
) -> None:
    """Run a source file on the execution service."""
    cfg = get_config()
    _setup_logging(cfg, verbose)
    language = _resolve_language(lang, file, cfg)
    code = file.read_text()
    program_input = stdin_file.read_text() if stdin_file else stdin

    async def _run() -> SessionState:
        async with CodeSession(cfg, language=language) as session:
            session.set_source(code)
            session.set_stdin(program_input)
            await session.submit_run()
            return session.state

    with console.status(f"Running {get_language(language).name}..."):
        state = asyncio.run(_run())
    _print_output(state)
    if is_failure(state.last_output):
        raise typer.Exit(1)


@app.command()
def review(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
) -> None:
    """Request an AI review of a source file."""
    cfg = get_config()
    _setup_logging(cfg, verbose)
    language = _resolve_language(None, file, cfg)
    code = file.read_text()

    async def _review() -> SessionState:
        async with CodeSession(cfg, language=language) as session:
            session.set_source(code)
            await session.submit_review()
            return session.state

    with console.status("Reviewing..."):
        state = asyncio.run(_review())
    _print_review(state)
    if is_failure(state.last_review):
        raise typer.Exit(1)


async def _background_run(session: CodeSession) -> None:
    await session.submit_run()
    _print_output(session.state)


async def _background_review(session: CodeSession) -> None:
    await session.submit_review()
    _print_review(session.state)


def _edit(text: str, extension: str) -> str | None:
    return typer.edit(text, extension=extension, require_save=True)


async def _repl(session: CodeSession) -> None:
    state = session.state
    pending: set[asyncio.Task[None]] = set()

    def spawn(coro) -> None:  # type: ignore[no-untyped-def]
        task = asyncio.create_task(coro)
        pending.add(task)
        task.add_done_callback(pending.discard)

    console.print(f"Session started ({get_language(state.language).name}). Type [bold]help[/bold] for commands.")

    while True:
        try:
            line = await asyncio.to_thread(console.input, f"[bold cyan]{state.language}>[/bold cyan] ")
        except EOFError:
            break

        cmd, _, arg = line.strip().partition(" ")
        arg = arg.strip()

        if not cmd:
            continue
        elif cmd in ("quit", "exit"):
            break
        elif cmd == "help":
            console.print(SESSION_HELP)
        elif cmd == "lang":
            if not arg:
                console.print(f"Current language: {get_language(state.language).name}")
                continue
            try:
                session.switch_language(arg)
            except InvalidLanguageError as e:
                console.print(f"[red]{e}[/red]")
                continue
            console.print(f"[green]Switched to {get_language(arg).name}; source reset to template.[/green]")
        elif cmd == "edit":
            try:
                edited = await asyncio.to_thread(_edit, state.source_text, get_language(state.language).extension)
            except click.ClickException as e:
                console.print(f"[red]Editor failed: {escape(e.format_message())}[/red]")
                continue
            if edited is None:
                console.print("[dim]Edit cancelled.[/dim]")
            else:
                session.set_source(edited)
        elif cmd == "stdin":
            if arg:
                session.set_stdin(arg)
            else:
                try:
                    edited = await asyncio.to_thread(_edit, state.stdin_text, ".txt")
                except click.ClickException as e:
                    console.print(f"[red]Editor failed: {escape(e.format_message())}[/red]")
                    continue
                if edited is not None:
                    session.set_stdin(edited)
            console.print(f"[dim]stdin: {len(state.stdin_text)} chars[/dim]")
        elif cmd == "load":
            path = Path(arg).expanduser()
            if not arg or not path.is_file():
                console.print(f"[red]File not found: {arg or '(none)'}[/red]")
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                console.print(f"[red]Could not read {path}: {escape(str(e))}[/red]")
                continue
            detected = language_for_path(path)
            if detected and detected != state.language:
                session.switch_language(detected)
            session.set_source(text)
            console.print(f"[green]Loaded {path} ({get_language(state.language).name})[/green]")
        elif cmd == "save":
            if not arg:
                console.print("[red]Usage: save <file>[/red]")
                continue
            try:
                Path(arg).expanduser().write_text(state.source_text, encoding="utf-8")
            except OSError as e:
                console.print(f"[red]Could not save {arg}: {escape(str(e))}[/red]")
                continue
            console.print(f"[green]Saved to {arg}[/green]")
        elif cmd == "show":
            _print_source(state)
        elif cmd == "run":
            if state.is_running:
                console.print("[yellow]A run is already in progress.[/yellow]")
                continue
            spawn(_background_run(session))
        elif cmd == "review":
            if state.is_reviewing:
                console.print("[yellow]A review is already in progress.[/yellow]")
                continue
            spawn(_background_review(session))
        elif cmd == "copy":
            if await session.copy_source():
                console.print("[green]Copied![/green]")
            else:
                console.print("[yellow]Could not copy to clipboard.[/yellow]")
        elif cmd == "status":
            console.print(format_status(state))
        elif cmd == "wait":
            if pending:
                await asyncio.gather(*pending)
        else:
            console.print(f"[red]Unknown command: {cmd}[/red] (type 'help')")

    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)


@app.command()
def session(
    lang: str = typer.Option(None, "--lang", "-l", help="Initial language"),
    file: Path = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="Load source from a file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
) -> None:
    """Start an interactive editing session."""
    cfg = get_config()
    _setup_logging(cfg, verbose)
    language = _resolve_language(lang, file, cfg)

    ok, info = check_clipboard()
    if not ok:
        console.print(f"[dim]{info}; 'copy' will not work.[/dim]")

    async def _session() -> None:
        async with CodeSession(cfg, language=language) as code_session:
            if file is not None:
                code_session.set_source(file.read_text())
            await _repl(code_session)

    try:
        asyncio.run(_session())
    except KeyboardInterrupt:
        pass
    console.print("\n[dim]Session ended.[/dim]")


@app.command()
def logs(
    lines: int = typer.Option(50, "--lines", "-n", help="Number of lines"),
) -> None:
    """View session logs."""
    log_path = Path(load_config().logging.file).expanduser().resolve()
    if not log_path.exists():
        console.print("[dim]No log file found.[/dim]")
        return

    content = log_path.read_text()
    log_lines = content.strip().split("\n")
    for line in log_lines[-lines:]:
        console.print(Text(line))


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"coderun-terminal v{__version__}")
    console.print(f"Python: {sys.version.split()[0]}")
    console.print(f"Config: {CONFIG_FILE}")
    console.print(f"Service: {load_config().service.base_url}")


if __name__ == "__main__":
    app()
