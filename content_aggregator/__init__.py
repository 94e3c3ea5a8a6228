"""Content aggregator service: cached, rate-limited access to upstream subreddit listings and media."""

__version__ = "0.1.0"
