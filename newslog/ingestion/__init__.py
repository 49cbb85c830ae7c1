"""Feed fetching and parsing."""

from .feed_client import FeedClient
from .formatting import clean_title
from .models import FetchResponse
from .parser import parse_feed

__all__ = ["FeedClient", "FetchResponse", "clean_title", "parse_feed"]
