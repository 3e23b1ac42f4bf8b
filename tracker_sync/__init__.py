"""Live event schedule sync: tracker polling, current-run reconciliation and boxart."""

__version__ = "1.0.0"
