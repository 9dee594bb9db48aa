"""webforms entrypoint.

Run with:
  python -m webforms
"""

import os
import uvicorn

from webforms.logging_config import setup_logging


def main() -> None:
    setup_logging()
    host = os.getenv("WEBFORMS_HOST", "127.0.0.1")
    port = int(os.getenv("WEBFORMS_PORT", "8000"))
    reload = os.getenv("WEBFORMS_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("webforms.app:create_app", factory=True, host=host, port=port, reload=reload)

if __name__ == "__main__":
    main()
