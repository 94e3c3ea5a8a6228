"""Shared fixtures for the content aggregator test-suite."""

import os

import pytest
from dotenv import load_dotenv

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

# Load test environment variables from .env.test in the project root
dotenv_path = os.path.join(project_root, ".env.test")
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path=dotenv_path)

from content_aggregator.tests.stubs.upstream_stub import (  # noqa: E402
    make_category_item,
    make_listing,
    make_post_item,
)


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def category_listing_body() -> str:
    return make_listing([
        make_category_item(),
        make_category_item(name="t5_2qh1i", display_name="AskReddit", title="Ask Reddit...", subscribers=40000000),
    ])


@pytest.fixture
def media_listing_body() -> str:
    """Image, native video, a text post without media and a gif, in that order."""
    return make_listing([
        make_post_item(),
        make_post_item(
            title="Clip",
            url="https://v.redd.it/xyz",
            is_video=True,
            media={"reddit_video": {"fallback_url": "https://v.redd.it/xyz/DASH_720.mp4"}},
        ),
        make_post_item(title="Discussion", url="https://www.reddit.com/r/pics/comments/def/"),
        make_post_item(title="Loop", url="https://i.imgur.com/loop.gif"),
    ])
