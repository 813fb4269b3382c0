#!/usr/bin/env python3
"""
Command-line interface for session-trace.

Provides commands to compile, publish and unpublish session traces.
"""

from __future__ import annotations

import asyncio
import json
import traceback
from pathlib import Path
from typing import Literal

import click
import typer

from session_trace.cli.logger import CLILogger
from session_trace.config.cli import settings
from session_trace.exceptions import SessionTraceError
from session_trace.services.parser import SessionParserService
from session_trace.services.publish import TracePublishService
from session_trace.services.title import TitleService, title_from_first_user_line
from session_trace.storage.gist import GistStorage
from session_trace.storage.http import PublishServerStorage
from session_trace.storage.local import LocalFileSystemStorage
from session_trace.storage.protocol import TraceStorage

app = typer.Typer(
    name='session-trace',
    help='Compile agent session logs into shareable traces',
    add_completion=False,
)

# Errors that are the user's to fix: print the message, no traceback
EXPECTED_ERRORS = (SessionTraceError, FileNotFoundError, ValueError)

GistVisibility = Literal['public', 'secret']


def _make_publish_service() -> TracePublishService:
    title_service = TitleService(
        api_key=settings.ANTHROPIC_API_KEY,
        model=settings.TITLE_MODEL,
        timeout_seconds=settings.TITLE_TIMEOUT_SECONDS,
    )
    return TracePublishService(SessionParserService(), title_service)


def _resolve_storage(
    target: str | None,
    gist_token: str | None = None,
    gist_visibility: GistVisibility = 'secret',
) -> TraceStorage:
    """
    Build a storage backend from a --to target.

    Targets:
        http(s)://host     publish server
        gist://[gist-id]   GitHub Gist (new gist when no ID)
        anything else      local directory
        (none)             PI_PUBLISH_URL
    """
    target = target or settings.PI_PUBLISH_URL
    if not target:
        raise ValueError('No publish target. Pass --to or set PI_PUBLISH_URL to your publish server.')

    if target.startswith('gist://'):
        token = gist_token or settings.GITHUB_TOKEN
        if not token:
            raise ValueError('GitHub token required for Gist storage. Use --gist-token or set GITHUB_TOKEN.')
        return GistStorage(token=token, gist_id=target[7:] or None, visibility=gist_visibility)

    if target.startswith(('http://', 'https://')):
        return PublishServerStorage(target)

    return LocalFileSystemStorage(Path(target).resolve())


def _fail(e: Exception, logger: CLILogger, action: str, verbose: bool) -> typer.Exit:
    """Report an error and return the Exit to raise."""
    if isinstance(e, EXPECTED_ERRORS):
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
    else:
        asyncio.run(logger.error(f'Failed to {action}: {e}'))
        if verbose:
            traceback.print_exc()
    return typer.Exit(1)


@app.command()
def compile(
    session_file: Path = typer.Argument(..., help='Session JSONL file'),
    output_dir: Path | None = typer.Option(None, '--output-dir', '-o', help='Write <id>.json here instead of stdout'),
    title: str | None = typer.Option(None, '--title', '-t', help='Trace title'),
    generate_title: bool = typer.Option(False, '--generate-title', help='Ask a model for the title'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Compile a session file into trace JSON."""
    logger = CLILogger(verbose=verbose)

    try:
        service = _make_publish_service()
        trace = asyncio.run(service.compile(session_file, logger, title=title, generate_title=generate_title))

        if output_dir is None:
            typer.echo(json.dumps(trace.to_payload(), indent=2, ensure_ascii=False))
            return

        storage = LocalFileSystemStorage(output_dir.resolve())
        location = asyncio.run(storage.save(trace.id, trace.to_json_bytes()))
        typer.secho('✓ Trace compiled!', fg=typer.colors.GREEN)
        typer.echo(f'  Path: {location}')
        typer.echo(f'  Turns: {len(trace.turns)}')
    except Exception as e:
        raise _fail(e, logger, 'compile session', verbose)


@app.command()
def publish(
    session_file: Path = typer.Argument(..., help='Session JSONL file'),
    to: str | None = typer.Option(None, '--to', help='Publish server URL, gist://[<gist-id>] or directory'),
    title: str | None = typer.Option(None, '--title', '-t', help='Trace title'),
    generate_title: bool = typer.Option(False, '--generate-title', help='Ask a model for the title'),
    gist_token: str | None = typer.Option(None, '--gist-token', help='GitHub token (or use GITHUB_TOKEN env)'),
    gist_visibility: GistVisibility = typer.Option(
        'secret',
        '--gist-visibility',
        help='Gist visibility',
        click_type=click.Choice(['public', 'secret']),
    ),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Publish a session as a trace."""
    logger = CLILogger(verbose=verbose)

    try:
        storage = _resolve_storage(to, gist_token, gist_visibility)
        service = _make_publish_service()
        result = asyncio.run(
            service.publish(session_file, storage, logger, title=title, generate_title=generate_title)
        )
    except Exception as e:
        raise _fail(e, logger, 'publish', verbose)

    typer.secho('✓ Published!', fg=typer.colors.GREEN)
    typer.echo(f'  URL: {result.location}')
    typer.echo(f'  Title: {result.title}')
    typer.echo(f'  Turns: {result.turn_count}')
    typer.echo(f'  Cost: ${result.total_cost:.4f}')
    if isinstance(storage, GistStorage):
        typer.echo(f'  Gist ID: {storage.gist_id}')


@app.command()
def unpublish(
    trace_id: str = typer.Argument(..., help='Trace (session) ID'),
    to: str | None = typer.Option(None, '--to', help='Publish server URL, gist://<gist-id> or directory'),
    gist_token: str | None = typer.Option(None, '--gist-token', help='GitHub token (or use GITHUB_TOKEN env)'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Remove a published trace."""
    logger = CLILogger(verbose=verbose)

    try:
        storage = _resolve_storage(to, gist_token)
        service = TracePublishService(SessionParserService())
        asyncio.run(service.unpublish(trace_id, storage, logger))
    except Exception as e:
        raise _fail(e, logger, 'unpublish', verbose)

    typer.secho('✓ Trace unpublished.', fg=typer.colors.GREEN)


@app.command()
def title(
    session_file: Path = typer.Argument(..., help='Session JSONL file'),
    generate: bool = typer.Option(False, '--generate', help='Ask a model instead of using the first prompt line'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Print the title a trace would get."""
    logger = CLILogger(verbose=verbose)

    try:
        service = _make_publish_service()
        session = asyncio.run(service.parser_service.load_session(session_file, logger))
        if generate and service.title_service is not None:
            result = asyncio.run(service.title_service.generate(session.messages, logger))
        else:
            result = title_from_first_user_line(session.messages)
    except Exception as e:
        raise _fail(e, logger, 'read session', verbose)

    typer.echo(result)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == '__main__':
    main()
