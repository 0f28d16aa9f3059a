"""Codeforces API client for fetching contests, standings and submissions."""

import hashlib
import logging
import random
import string
import time
from typing import Any, Optional

import httpx

from cftui.exceptions import ApiError, NoAuthorizationError
from cftui.models import Contest, ProblemSet, Standings, Submission


logger = logging.getLogger(__name__)

API_URL = "https://codeforces.com/api/"
BASE_URL = "https://codeforces.com/"

RAND_CHARSET = string.ascii_letters + string.digits + ")(*&^%$#@!~"


def _format_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ";".join(str(v) for v in value)
    return str(value)


def sign_params(
    method: str,
    params: dict[str, Any],
    key: str,
    secret: str,
    now: Optional[int] = None,
    rand: Optional[str] = None,
) -> list[tuple[str, str]]:
    """Add apiKey, time and apiSig to the parameters of an authorized request."""
    signed = [(name, _format_param(value)) for name, value in params.items()]
    signed.append(("apiKey", key))
    signed.append(("time", str(now if now is not None else int(time.time()))))
    signed.sort()

    rand = rand or "".join(random.choice(RAND_CHARSET) for _ in range(6))
    query = "&".join(f"{name}={value}" for name, value in signed)
    digest = hashlib.sha512(f"{rand}/{method}?{query}#{secret}".encode()).hexdigest()
    signed.append(("apiSig", rand + digest))
    return signed


class CodeforcesClient:
    """Client for the Codeforces JSON API.

    Requests are signed when both key and secret are configured and fall back
    to anonymous requests if the signed one fails.
    """

    def __init__(
        self,
        key: Optional[str] = None,
        secret: Optional[str] = None,
        http: Optional[httpx.Client] = None,
    ) -> None:
        self._key = key
        self._secret = secret
        self._client = http or httpx.Client(base_url=API_URL, timeout=30.0)

    @property
    def authorized(self) -> bool:
        return bool(self._key and self._secret)

    def _get(self, method: str, params: list[tuple[str, str]]) -> Any:
        logger.debug("GET %s %s", method, [name for name, _ in params])
        try:
            response = self._client.get(method, params=params)
        except httpx.HTTPError as e:
            raise ApiError(f"Request to {method} failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and data.get("status") == "FAILED":
            raise ApiError(data.get("comment") or f"{method} failed")
        if response.status_code != 200:
            raise ApiError(f"{method} failed: HTTP {response.status_code}")
        if not isinstance(data, dict) or data.get("status") != "OK":
            raise ApiError(f"{method} returned a malformed response")

        return data.get("result")

    def request(self, method: str, params: dict[str, Any]) -> Any:
        """Anonymous request."""
        return self._get(method, [(name, _format_param(value)) for name, value in params.items()])

    def request_signed(self, method: str, params: dict[str, Any]) -> Any:
        """Authorized request. Raises NoAuthorizationError without key or secret."""
        if not self._key:
            raise NoAuthorizationError("key")
        if not self._secret:
            raise NoAuthorizationError("secret")
        return self._get(method, sign_params(method, params, self._key, self._secret))

    def request_smart(self, method: str, params: dict[str, Any]) -> Any:
        if self.authorized:
            try:
                return self.request_signed(method, params)
            except ApiError as e:
                logger.warning("Signed %s failed, retrying anonymously: %s", method, e)
        return self.request(method, params)

    def contest_list(self, gym: Optional[bool] = None) -> list[Contest]:
        params: dict[str, Any] = {}
        if gym is not None:
            params["gym"] = gym
        result = self.request_smart("contest.list", params)
        return [Contest.from_json(c) for c in result]

    def contest_standings(
        self,
        contest_id: int,
        from_: Optional[int] = None,
        count: Optional[int] = None,
        handles: Optional[list[str]] = None,
        room: Optional[int] = None,
        show_unofficial: Optional[bool] = None,
    ) -> Standings:
        params: dict[str, Any] = {"contestId": contest_id}
        if from_ is not None:
            params["from"] = from_
        if count is not None:
            params["count"] = count
        if handles:
            params["handles"] = handles
        if room is not None:
            params["room"] = room
        if show_unofficial is not None:
            params["showUnofficial"] = show_unofficial
        return Standings.from_json(self.request_smart("contest.standings", params))

    def contest_status(
        self,
        contest_id: int,
        handle: Optional[str] = None,
        from_: Optional[int] = None,
        count: Optional[int] = None,
    ) -> list[Submission]:
        params: dict[str, Any] = {"contestId": contest_id}
        if handle is not None:
            params["handle"] = handle
        if from_ is not None:
            params["from"] = from_
        if count is not None:
            params["count"] = count
        result = self.request_smart("contest.status", params)
        return [Submission.from_json(s) for s in result]

    def problemset_problems(
        self,
        tags: Optional[list[str]] = None,
        problemset_name: Optional[str] = None,
    ) -> ProblemSet:
        params: dict[str, Any] = {}
        if tags:
            params["tags"] = tags
        if problemset_name is not None:
            params["problemsetName"] = problemset_name
        return ProblemSet.from_json(self.request_smart("problemset.problems", params))

    def close(self) -> None:
        self._client.close()
