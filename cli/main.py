import asyncio
import json

import typer
import uvicorn

from tracker.app.config import settings

app = typer.Typer(help="Feature Request Tracker - a small CRUD API with status history")

SEED_CALLER = "setup-script"


@app.command()
def start(
    host: str = typer.Option(settings.host, help="Interface to bind."),
    port: int = typer.Option(settings.port, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Start the API server."""
    typer.echo(f"Starting Feature Request Tracker on http://{host}:{port} (docs at /api-docs)")
    uvicorn.run(
        "tracker.app.main:app",
        host=host,
        port=port,
        reload=reload,
    )


@app.command("init-db")
def init_db_command() -> None:
    """Create the database tables."""
    from tracker.app.db import init_db

    asyncio.run(init_db())
    typer.echo(f"Database ready: {settings.database_url}")


async def _seed() -> dict:
    from tracker.app.db import UnitOfWork, async_session, init_db
    from tracker.app.models.status import FeatureStatus
    from tracker.app.schemas.feature_request import FeatureRequestCreate, FeatureRequestResponse
    from tracker.app.schemas.validation import validate
    from tracker.app.services.events import LoggingEventRecorder
    from tracker.app.services.feature_requests import FeatureRequestService

    await init_db()
    data, errors = validate(
        FeatureRequestCreate,
        {
            "title": "Add dark mode support",
            "description": "Implement dark mode for better user experience in low-light environments",
        },
    )
    if errors:
        raise typer.BadParameter(json.dumps(errors))

    async with async_session() as session:
        service = FeatureRequestService(UnitOfWork(session), LoggingEventRecorder())
        feature = await service.create(data.title, data.description, SEED_CALLER)
        feature = await service.update_status(feature.id, FeatureStatus.IN_PROGRESS, SEED_CALLER)
        return FeatureRequestResponse.model_validate(feature).model_dump(by_alias=True, mode="json")


@app.command()
def seed() -> None:
    """Insert a sample feature request and move it to IN_PROGRESS."""
    typer.echo("Setting up the database...")
    feature = asyncio.run(_seed())
    typer.echo(json.dumps(feature, indent=2))
    typer.echo("Database setup completed successfully!")


if __name__ == "__main__":
    app()
