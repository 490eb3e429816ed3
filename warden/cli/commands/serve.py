"""Serve command - run the HTTP API."""

import cyclopts
import uvicorn

from warden.config import Config

app = cyclopts.App(name="serve", help="Run the HTTP API")


@app.default
def serve(host: str | None = None, port: int | None = None, reload: bool = False) -> None:
    """Run the API with uvicorn. Host and port default to the server config."""
    config = Config()  # type: ignore[call-arg]
    uvicorn.run(
        "warden.application.api.rest.app:create_app",
        factory=True,
        host=host or config.server.host,
        port=port or config.server.port,
        reload=reload,
        log_config=None,
    )
