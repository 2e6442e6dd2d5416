"""Allow ``python -m pagesim``."""

from pagesim.cli import main

raise SystemExit(main())
