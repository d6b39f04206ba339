"""script-publisher - Homebrew formula and Debian package generation for scripts.

High-level public API:

from scriptpublish import load_config, publish

cfg = load_config()  # publish.config.yaml when present, built-in defaults otherwise
result = publish('utility/unlock-pdf.sh', cfg)
print(result.formula_path)

The CLI (``script-publisher`` / ``python -m scriptpublish``) delegates to
``publish``.
"""

from __future__ import annotations

from .config import PublishConfig, load_config
from .models import PublishRecord, PublishResult
from .pipeline import publish

__version__ = "0.1.0"

__all__ = [
    "PublishConfig",
    "PublishRecord",
    "PublishResult",
    "load_config",
    "publish",
    "__version__",
]
