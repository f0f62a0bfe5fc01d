"""Typer CLI entrypoint for the assessment composition engine."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any, List, Optional

import structlog
import typer
from pydantic import ValidationError

from . import __version__
from .adapters import FilePayload
from .config import ConfigManager
from .container import create_container
from .errors import AssessmentError
from .logging import configure_logging
from .persistence import JSONRecordStore, OutputWriter
from .schemas.config import AppConfig

app = typer.Typer(help="Assessment composition CLI.")


def _load_settings(config: Optional[Path]) -> AppConfig:
    if config is None:
        return AppConfig()
    try:
        return ConfigManager(config.parent).load_app_config(config.stem)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


@app.command()
def compose(
    role: str = typer.Option("", help="Target role, e.g. 'Senior Frontend Engineer'."),
    description: Optional[Path] = typer.Option(
        None, exists=True, readable=True, dir_okay=False, help="Role description text file."
    ),
    attach: Optional[List[Path]] = typer.Option(
        None, exists=True, readable=True, dir_okay=False, help="Files to run through text extraction."
    ),
    experience: str = typer.Option("senior", help="Experience tier: junior, senior or expert."),
    template: Optional[str] = typer.Option(None, help="Template id seeding the block outline."),
    more: int = typer.Option(0, min=0, help="Extra generation rounds appended in the editor."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    records: Optional[Path] = typer.Option(None, file_okay=False, help="Directory receiving the saved assessment."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    origin: Optional[str] = typer.Option(None, help="Origin used for the preview link."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    pretty_logs: bool = typer.Option(False, "--pretty-logs", help="Render logs for the console instead of JSON."),
) -> None:
    """Run a full authoring pass and write the summary."""
    settings = _load_settings(config)
    configure_logging(log_level, json_output=not pretty_logs)

    container = create_container(settings=settings)
    registry = container.sessions()
    workflow = registry.workflow
    session = registry.open(with_templates=template is not None)
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(session_id=session.session_id)

    try:
        if template is not None:
            workflow.choose_template(session, template)

        text_parts: list[str] = []
        if description:
            text_parts.append(description.read_text(encoding="utf-8"))
        if attach:
            payloads = [
                FilePayload(
                    name=path.name,
                    content=path.read_bytes(),
                    content_type=mimetypes.guess_type(path.name)[0] or "application/octet-stream",
                )
                for path in attach
            ]
            text_parts.append(container.text_extractor().extract(payloads))

        session.draft.role = role
        try:
            session.draft.experience = experience
        except ValidationError as exc:
            raise typer.BadParameter(
                "Experience must be one of: junior, senior, expert", param_hint="experience"
            ) from exc
        session.draft.description = "\n\n".join(part.strip() for part in text_parts if part.strip())

        if not workflow.can_analyze(session):
            raise typer.BadParameter("Provide --role or a description", param_hint="role")

        workflow.analyze(session)
        if session.error:
            typer.echo(f"Analysis failed: {session.error}", err=True)
            raise typer.Exit(code=1)

        workflow.open_editor(session)
        for _ in range(more):
            workflow.generate_more(session)
        workflow.open_summary(session)

        invitation = workflow.preview(session, origin=origin)
        record: dict[str, Any] | None = None
        if records is not None:
            record = workflow.save(session, JSONRecordStore(records))
    except AssessmentError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    payload = {
        "app_version": __version__,
        "session_id": session.session_id,
        "summary": workflow.summary(session).to_dict(),
        "categories": session.tagger.as_dict(),
        "questions": session.bank.snapshot(),
        "preview": invitation.model_dump(),
        "record_id": record["id"] if record else None,
    }
    OutputWriter().write(output, payload)
    typer.echo(f"Composed {len(session.bank)} questions. Preview: {invitation.url}")


@app.command()
def templates(
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
) -> None:
    """List available assessment templates."""
    container = create_container(settings=_load_settings(config))
    for item in container.templates().templates():
        minutes = sum(block.duration for block in item.blocks)
        typer.echo(f"{item.id}\t{item.name}\t{len(item.blocks)} blocks\t{minutes} min")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
