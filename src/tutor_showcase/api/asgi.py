"""ASGI entrypoint for the showcase API and bot webhook."""

from tutor_showcase.api.app import create_app
from tutor_showcase.containers import build_container

app = create_app(build_container())
