"""pipedit - structural editor core for ingest processor pipelines."""

__version__ = "0.1.0"
