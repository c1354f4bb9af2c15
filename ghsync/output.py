"""
Structured output for ghsync.

The machine-readable summary goes to stdout as one JSON document:

    {"stats": {"cloned": 3, "updated": 0, "fetched": 0, "skipped": 0,
               "failed": 0, "duration_seconds": 12},
     "repositories": [{"org": "acme", "name": "widgets", "action": "cloned"}]}
"""

import json
import sys
from typing import Any, Dict, Optional


def emit_json(data: Dict[str, Any], stream=None, indent: Optional[int] = 2) -> None:
    """
    Write one JSON document to stdout (or ``stream``).

    Args:
        data: JSON-serializable object
        stream: Output stream (defaults to sys.stdout at call time)
        indent: Indentation (None for a single line)
    """
    stream = stream or sys.stdout
    print(json.dumps(data, ensure_ascii=False, indent=indent), file=stream, flush=True)


def emit_error(error: str, type: str = "error", context: Optional[Dict[str, Any]] = None) -> None:
    """
    Emit error to stderr as JSON.

    Args:
        error: Error message
        type: Error type (e.g., "FatalConfigError")
        context: Additional context dict
    """
    obj = {
        'error': error,
        'type': type
    }
    if context:
        obj['context'] = context

    print(json.dumps(obj, ensure_ascii=False), file=sys.stderr, flush=True)
