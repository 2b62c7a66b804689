"""ASGI entrypoint for the color profile API."""

from color_profile.api.app import create_app
from color_profile.containers import build_container

app = create_app(build_container())
