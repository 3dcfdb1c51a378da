"""
Create the `foods` / `meals` tables if they do not exist.

    python -m scripts.init_db
"""
from __future__ import annotations

import asyncio

from dotenv import load_dotenv
load_dotenv()

from services.db import init_models  # noqa: E402


def main() -> None:
    asyncio.run(init_models())
    print("✓ tables ready")


if __name__ == "__main__":
    main()
