"""Package entry point for ``python -m whisper_transcriber``.

RULES:
- ``--serve`` starts the HTTP API (uvicorn)
- Without ``--serve``, falls through to the CLI
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from whisper_transcriber.server.app import run_api
        run_api()
    else:
        from whisper_transcriber.cli import main
        main()
