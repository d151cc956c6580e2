"""Option decoding and the recognize-then-format pipeline.

WHY: The server and CLI share the same steps between receiving a request
and producing a file. This package holds those steps so neither entry
point has formatting logic of its own.

HOW: options.py turns raw form/CLI values into a FormattingConfig,
pipeline.py validates media files and runs recognizer + formatter.

RULES:
- No HTTP or argparse code here; entry points stay thin
- Formatting itself lives in the caption_engine package
"""
