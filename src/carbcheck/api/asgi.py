"""ASGI entrypoint for the CarbCheck API."""

from carbcheck.api.app import create_app
from carbcheck.containers import build_container

app = create_app(build_container())
