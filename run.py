"""Application entry point.

Serves the analytics API through Gunicorn; bind address and worker count
come from READLYTICS_BIND and READLYTICS_WORKERS.
"""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from readlytics import create_app  # noqa: E402

# This app is intended to be run via Gunicorn only
app = create_app()
if __name__ == '__main__':
    import os
    import sys

    command = [
        "gunicorn",
        "-w", os.environ.get('READLYTICS_WORKERS', '1'),
        "-b", os.environ.get('READLYTICS_BIND', '0.0.0.0:5055'),
        "run:app"
    ]

    print(f"Launching Readlytics under Gunicorn: {' '.join(command)}")
    try:
        os.execvp(command[0], command)
    except FileNotFoundError:
        print("Error: 'gunicorn' command not found.", file=sys.stderr)
        sys.exit(1)
