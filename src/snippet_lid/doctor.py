from __future__ import annotations

import os
import platform
import sys
from importlib import metadata
from typing import Optional

from .errors import SnippetLidError
from .model import MODEL_PATH_ENV, default_model, resolve_model_path


def _dist_version(dist_name: str) -> Optional[str]:
    try:
        return metadata.version(dist_name)
    except metadata.PackageNotFoundError:
        return None


def collect_doctor_info() -> dict[str, object]:
    """
    Collect a best-effort environment report for `snippet-lid doctor`.

    No network access; loads the resolved model to report whether it validates.
    """

    # Dist names (PyPI) may differ from import names.
    dists: dict[str, str] = {
        # Core
        "regex": "regex",
        "typer": "typer",
        "rich": "rich",
        # Optional features
        "fastapi": "fastapi",
        "pydantic": "pydantic",
        "uvicorn": "uvicorn",
        "httpx": "httpx",
        "pytest": "pytest",
    }

    packages: dict[str, dict[str, object]] = {}
    for name, dist in dists.items():
        v = _dist_version(dist)
        packages[name] = {"installed": v is not None, "version": v}

    model_path = resolve_model_path()
    model_info: dict[str, object] = {
        "path": str(model_path),
        "present": model_path.is_file(),
        "env_override": os.getenv(MODEL_PATH_ENV),
    }
    if model_path.is_file():
        try:
            m = default_model()
        except (OSError, SnippetLidError) as e:
            model_info["valid"] = False
            model_info["error"] = str(e)
        else:
            model_info.update(
                {
                    "valid": True,
                    "n_features": len(m.vocabulary),
                    "n_trees": len(m.forest),
                    "n_labels": len(m.labels),
                }
            )

    return {
        "python": {"version": sys.version.split()[0], "executable": sys.executable},
        "platform": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "model": model_info,
        "packages": packages,
    }
