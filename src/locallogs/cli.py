import signal
import sys

# Handle Ctrl+C gracefully before any other imports
signal.signal(signal.SIGINT, lambda *_: sys.exit(130))

import json
import os
import click
import typer

from .config import configure_logging, load_config, set_dotenv_path
from .logfiles import queries
from .resolver import LogSource, load_log_source

app = typer.Typer()


@app.callback()
def callback(
	ctx: typer.Context,
	env: str = typer.Option(None, "--env", help="Load settings from this .env file"),
	logs_dir: str = typer.Option(None, "--logs-dir", help="Read logs from this directory"),
):
	"""Inspect local log files, or serve them to an MCP client over stdio."""
	if env:
		set_dotenv_path(env)
	ctx.obj = {"logs_dir": logs_dir}


def _load(ctx):
	cfg = load_config()
	configure_logging(cfg.log_level)
	logs_dir = ctx.obj.get("logs_dir") if ctx.obj else None
	if logs_dir:
		# Taken as given, even when it does not exist yet
		return cfg, LogSource(logs_dir=os.path.abspath(logs_dir), extensions=cfg.log_extensions)
	return cfg, load_log_source(cfg)


def _echo_json(result):
	typer.echo(json.dumps(result, indent=2))
	_exit_on_error(result)


def _echo_content(result, as_json):
	if as_json:
		_echo_json(result)
		return
	if result.get("content"):
		typer.echo(result["content"])
	elif result.get("message"):
		typer.echo(typer.style(result["message"], dim=True), err=True)
	_exit_on_error(result)


def _exit_on_error(result):
	if result.get("error"):
		typer.echo(typer.style(f"Error: {result['error']}", fg=typer.colors.RED), err=True)
		raise typer.Exit(1)


@app.command()
def serve(ctx: typer.Context):
	"""Run the MCP server on stdin/stdout until input closes."""
	from .mcp.server import Dispatcher, serve as serve_stdio

	_, source = _load(ctx)
	serve_stdio(Dispatcher(source))


@app.command()
def files(ctx: typer.Context):
	"""List log files, most recently modified first."""
	_, source = _load(ctx)
	_echo_json(queries.list_files(source))


@app.command()
def tail(
	ctx: typer.Context,
	filename: str = typer.Argument(queries.DEFAULT_LOG_FILE),
	lines: int = typer.Option(queries.DEFAULT_TAIL_LINES, "--lines", "-n"),
	as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
):
	"""Show the last lines of a log file."""
	_, source = _load(ctx)
	_echo_content(queries.tail(source, filename, lines), as_json)


@app.command()
def errors(
	ctx: typer.Context,
	lines: int = typer.Option(queries.DEFAULT_ERROR_LINES, "--lines", "-n"),
	as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
):
	"""Show recent entries from error.log."""
	_, source = _load(ctx)
	_echo_content(queries.get_errors(source, lines), as_json)


@app.command()
def status(ctx: typer.Context):
	"""Guess server status from recent log lines."""
	_, source = _load(ctx)
	_echo_json(queries.get_status(source))


@app.command()
def watch(
	ctx: typer.Context,
	filename: str = typer.Argument(queries.DEFAULT_LOG_FILE),
):
	"""Show the current size and modification time of a log file."""
	_, source = _load(ctx)
	_echo_json(queries.watch(source, filename))


@app.command()
def search(
	ctx: typer.Context,
	query: str = typer.Argument(..., help="Text to search for"),
	filename: str = typer.Option(queries.DEFAULT_LOG_FILE, "--file", "-f"),
	lines: int = typer.Option(queries.DEFAULT_MAX_MATCHES, "--lines", "-n", help="Maximum matches"),
):
	"""Search a log file for text (case-insensitive)."""
	_, source = _load(ctx)
	_echo_json(queries.search(source, query, filename, lines))


def main():
	if len(sys.argv) == 1:
		# No arguments: show help
		command = typer.main.get_command(app)
		ctx = click.Context(command)
		typer.echo(command.get_help(ctx), err=True)
		return 0
	try:
		app()
	except typer.Exit:
		raise
	except Exception as e:
		typer.echo(typer.style(
			f"Fatal error: {type(e).__name__}: {e}",
			fg=typer.colors.RED
		), err=True)
		sys.exit(1)

if __name__ == "__main__":
	main()
