"""
robots.txt policy helper for crawl compliance.

Rules are grouped by user-agent and matched longest-prefix-wins, with
Allow winning ties. The stdlib parser applies first-match semantics, so
groups are parsed here directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from urllib.parse import urlparse

import requests

from app.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)


@dataclass
class RobotsGroup:
    user_agents: list[str] = field(default_factory=list)
    allow: list[str] = field(default_factory=list)
    disallow: list[str] = field(default_factory=list)

    @property
    def has_rules(self) -> bool:
        return bool(self.allow or self.disallow)


def parse_robots(text: str) -> list[RobotsGroup]:
    """
    Parse robots.txt into user-agent groups.

    Consecutive user-agent lines share a group; a user-agent line after
    rules starts a new one.
    """

    groups: list[RobotsGroup] = []
    current: RobotsGroup | None = None

    for raw_line in text.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line or ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip().lower()
        value = value.strip()

        if key == "user-agent":
            if current is None or current.has_rules:
                current = RobotsGroup()
                groups.append(current)
            current.user_agents.append(value.lower())
        elif key in ("allow", "disallow") and current is not None:
            if key == "allow":
                current.allow.append(value)
            else:
                current.disallow.append(value)

    return groups


def select_group(groups: list[RobotsGroup], user_agent: str) -> RobotsGroup | None:
    """
    Prefer a group naming a token contained in the user agent, else `*`.
    """

    ua = user_agent.lower()
    for group in groups:
        if any(token != "*" and token in ua for token in group.user_agents):
            return group
    for group in groups:
        if "*" in group.user_agents:
            return group
    return None


def _longest_match(rules: list[str], path: str) -> int:
    longest = -1
    for rule in rules:
        if rule and path.startswith(rule) and len(rule) > longest:
            longest = len(rule)
    return longest


def is_path_allowed(group: RobotsGroup | None, path: str) -> bool:
    if group is None:
        return True
    allow_len = _longest_match(group.allow, path)
    disallow_len = _longest_match(group.disallow, path)
    if allow_len < 0 and disallow_len < 0:
        return True
    return allow_len >= disallow_len


class RobotsPolicyManager:
    """
    Caches parsed robots.txt groups per origin.

    An unreachable or non-OK robots.txt allows everything.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout_seconds: float = 5.0,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout_seconds = max(1.5, timeout_seconds)
        self._cache: dict[str, list[RobotsGroup] | None] = {}

    def can_fetch(self, *, url: str, user_agent: str) -> bool:
        parsed = urlparse(url)
        groups = self._get_groups(self._origin(url), user_agent)
        if groups is None:
            return True
        return is_path_allowed(select_group(groups, user_agent), parsed.path or "/")

    def _get_groups(self, origin: str, user_agent: str) -> list[RobotsGroup] | None:
        if origin in self._cache:
            return self._cache[origin]

        robots_url = f"{origin}/robots.txt"
        groups: list[RobotsGroup] | None = None
        try:
            response = self._session.get(
                robots_url,
                headers={"User-Agent": user_agent},
                timeout=self._timeout_seconds,
            )
            if response.ok:
                groups = parse_robots(response.text)
                log_event(
                    logger,
                    logging.INFO,
                    "robots_loaded",
                    origin=origin,
                    groups=len(groups),
                )
            else:
                log_event(
                    logger,
                    logging.INFO,
                    "robots_unavailable",
                    origin=origin,
                    status_code=response.status_code,
                )
        except requests.RequestException as exc:
            log_event(
                logger,
                logging.WARNING,
                "robots_fetch_failed",
                origin=origin,
                robots_url=robots_url,
                error=str(exc),
            )

        self._cache[origin] = groups
        return groups

    @staticmethod
    def _origin(url: str) -> str:
        parsed = urlparse(url)
        scheme = parsed.scheme or "https"
        return f"{scheme}://{parsed.netloc}"
