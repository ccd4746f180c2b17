"""Vercel serverless entrypoint for the meal tracker API.

Vercel imports this file from the repository root without installing the
package, so ``src`` is put on the import path before loading the app.
"""

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from meal_tracker.api.asgi import app  # noqa: E402

__all__ = ["app"]
