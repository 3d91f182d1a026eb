"""ASGI entrypoint for the food donation API."""

from foodshare.api.app import create_app
from foodshare.containers import build_container

app = create_app(build_container())
