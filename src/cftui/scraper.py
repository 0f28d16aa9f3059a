"""Scrape sample tests from Codeforces problem pages."""

import logging
from typing import Optional

import httpx
from bs4 import BeautifulSoup, Tag

from cftui.client import BASE_URL
from cftui.exceptions import ScrapeError
from cftui.models import TestCase


logger = logging.getLogger(__name__)


def problem_url(contest_id: int, problem_index: str) -> str:
    return f"{BASE_URL}contest/{contest_id}/problem/{problem_index}"


def _pre_text(block: Tag) -> str:
    pre = block.find("pre")
    if pre is None:
        return ""

    # Newer statements wrap every line in its own div.
    lines = pre.find_all("div", class_="test-example-line")
    if lines:
        return "\n".join(line.get_text() for line in lines) + "\n"

    for br in pre.find_all("br"):
        br.replace_with("\n")
    return pre.get_text()


def extract_test_cases(html: str) -> list[TestCase]:
    """Pair every div.input pre with the div.output pre that follows it."""
    soup = BeautifulSoup(html, "html.parser")
    inputs = [_pre_text(block) for block in soup.select("div.input")]
    outputs = [_pre_text(block) for block in soup.select("div.output")]
    return [TestCase(input=i, answer=o) for i, o in zip(inputs, outputs)]


def scrape_test_cases(url: str, client: Optional[httpx.Client] = None) -> list[TestCase]:
    """Fetch a problem page and extract its sample tests."""
    http = client or httpx.Client(timeout=30.0, follow_redirects=True)
    logger.debug("Scraping %s", url)
    try:
        response = http.get(url)
    except httpx.HTTPError as e:
        raise ScrapeError(f"Error occured when making a GET request: {e}") from e
    finally:
        if client is None:
            http.close()

    if response.status_code != 200:
        raise ScrapeError(f"Server returned status: {response.status_code}.\n\nFailed to parse {url}")

    return extract_test_cases(response.text)
