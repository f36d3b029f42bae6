import logging
import click
import uvicorn
from curriculum_backend.settings import settings


@click.command()
@click.option("--host", default="0.0.0.0")
@click.option("--port", default=8000, type=int)
@click.option("--reload", is_flag=True, default=False)
def serve(host, port, reload):
    """Run the HTTP API."""

    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    uvicorn.run("curriculum_backend.server:app", host=host, port=port, log_level=settings.LOG_LEVEL, reload=reload, workers=1)
