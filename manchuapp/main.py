"""Main entry point for Manchu Reader."""

# Set process name early on macOS (before any Qt imports)
# This ensures the menu bar shows the correct app name in development mode
import platform
import sys

if platform.system() == "Darwin":
    import setproctitle

    setproctitle.setproctitle("Manchu Reader")

import logging

from manchuapp.ui.application import create_application


def main() -> None:
    """
    Run the Manchu Reader application.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app, _window = create_application()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
