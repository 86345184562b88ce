"""Command-line entrypoint that serves the gallery with uvicorn."""

import uvicorn

from photo_gallery.api.app import create_app
from photo_gallery.config import Settings
from photo_gallery.containers import build_container


def main() -> None:
    """Run the HTTP server on the configured host and port."""
    settings = Settings()
    app = create_app(build_container(settings))
    print(f"Photo Gallery listening on http://localhost:{settings.port}")  # noqa: T201
    uvicorn.run(app, host=settings.host, port=settings.port, access_log=False)


if __name__ == "__main__":
    main()
