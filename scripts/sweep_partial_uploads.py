#!/usr/bin/env python3
"""Remove abandoned partial uploads from the upload directory.

Uploads already sweep before every request; run this from cron when the
service sees little traffic and stale ``*.part`` entries pile up.

Usage: python scripts/sweep_partial_uploads.py [TARGET_DIR]
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from application.use_cases.upload_use_cases import SweepPartialUploadsUseCase  # noqa: E402
from infrastructure.di.container import create_container  # noqa: E402
from infrastructure.logging import setup_logging  # noqa: E402


def main(argv: list[str]) -> int:
    setup_logging()
    target_dir = Path(argv[1]) if len(argv) > 1 else None

    use_case = create_container()[SweepPartialUploadsUseCase]
    removed = use_case.execute(target_dir).unwrap()

    for path in removed:
        print(f"removed {path}")
    print(f"{len(removed)} stale partial upload(s) removed")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
