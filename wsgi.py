"""WSGI entry point for production server."""

import os
import sys

from talentbridge import create_app

# Ensure the project root is in the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Capture the full traceback in logs if app init fails during worker boot.
try:
    app = create_app()
except Exception:
    import traceback

    print("\nFATAL: Failed to create Flask application during startup:\n", file=sys.stderr)
    traceback.print_exc()
    # Re-raise so the process exits and Gunicorn reports the boot failure
    raise

if __name__ == "__main__":
    from config.settings import settings

    settings.display_config()
    app.run(host=settings.host, port=settings.port)
