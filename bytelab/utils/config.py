from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _p(val: str | None, default: Path) -> Path:
    return Path(os.path.expandvars(val)).expanduser().resolve() if val else default.resolve()


def _int(name: str, default: int) -> int:
    val = os.getenv(name)
    return int(val) if val else default


# If no .env present put data root next to the repo (../bytelab-data)
_DEFAULT_DATA_ROOT = Path.cwd() / ".." / "bytelab-data"

DATA_ROOT = _p(os.getenv("DATA_ROOT"), _DEFAULT_DATA_ROOT)
OUTPUTS_DIR = _p(os.getenv("OUTPUTS_DIR"), DATA_ROOT / "outputs")

# Engine defaults
DEFAULT_COUNTER = os.getenv("BYTELAB_COUNTER", "uint32").strip().lower()
READ_WINDOW = _int("BYTELAB_READ_WINDOW", 64 * 1024 * 1024)
DEFAULT_ACCURACY = _int("BYTELAB_ACCURACY", 1024 * 1024)


def ensure_dirs() -> None:
    for d in (DATA_ROOT, OUTPUTS_DIR):
        d.mkdir(parents=True, exist_ok=True)
