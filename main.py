from __future__ import annotations

from grapher_plot.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
