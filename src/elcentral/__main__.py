"""Allow running the exporter with ``python -m elcentral``."""

from elcentral.cli import main

raise SystemExit(main())
