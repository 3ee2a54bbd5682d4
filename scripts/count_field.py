from __future__ import annotations

from fieldcount.cli import app

if __name__ == "__main__":
    app()
