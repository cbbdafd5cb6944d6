"""srcclr-ci: fetch, cache and run the SourceClear agent in CI."""

__version__ = "1.0.0"
