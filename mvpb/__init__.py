"""mvpb: streaming app-scaffold parser and build-progress engine."""

__version__ = "0.1.0"
