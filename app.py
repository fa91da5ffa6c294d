import logging
import os
import socket

from progress_editor.logging_config import configure_logging
from progress_editor.ui.dash_app import create_dash_app

DEFAULT_PORT = 8052
HOST = "127.0.0.1"

configure_logging()
logger = logging.getLogger("progress_editor.app")

app = create_dash_app()
server = app.server


def port_is_free(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex((HOST, port)) != 0


def pick_port(preferred: int, attempts: int = 100) -> int:
    """First free port in [preferred, preferred + attempts); preferred if none is."""
    for port in range(preferred, preferred + attempts):
        if port_is_free(port):
            return port
    return preferred


def main() -> None:
    preferred = int(os.getenv("PORT", str(DEFAULT_PORT)))
    port = pick_port(preferred)
    if port != preferred:
        logger.warning("Port %d is taken, using %d", preferred, port)

    # local single-user editor: loopback only
    app.run(host=HOST, port=port, debug=os.getenv("DEBUG", "0") == "1")


if __name__ == "__main__":
    main()
