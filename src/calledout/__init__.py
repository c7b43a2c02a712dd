"""calledout - fuzzy jump and link to named callouts in a Markdown vault."""

__version__ = "0.1.0"
