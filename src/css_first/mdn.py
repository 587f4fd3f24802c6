"""
MDN documentation client.

Fetches a property's MDN page and extracts description, syntax, browser
versions, examples, related properties and the Baseline badge.  Every
failure surfaces as an exception; the support resolver decides what to do
with it.
"""

import logging
import re
from typing import Dict, List, Optional

import httpx
from bs4 import BeautifulSoup

from .errors import DocumentationParseError
from .models import Baseline, BrowserSupportRecord, BrowserVersion, PropertyDocumentation
from .settings import DEFAULT_MDN_BASE_URL

logger = logging.getLogger(__name__)

_USER_AGENT = "css-first-mcp/0.1.0"

# HTML attributes live outside the CSS reference tree
MDN_URL_OVERRIDES: Dict[str, str] = {
    "commandfor": "https://developer.mozilla.org/en-US/docs/Web/API/Invoker_Commands_API",
    "command": "https://developer.mozilla.org/en-US/docs/Web/API/Invoker_Commands_API",
    "closedby": "https://developer.mozilla.org/en-US/docs/Web/API/HTMLDialogElement/closedBy",
}

_SECTION_END = r"(?:\n\s*\n|\n#|$)"
_SYNTAX_RE = re.compile(r"(?:Formal syntax|Syntax)[:\s]*(.*?)" + _SECTION_END, re.I | re.S)
_BROWSER_RE = re.compile(
    r"(?:Browser compatibility|Browser support)[:\s]*(.*?)" + _SECTION_END, re.I | re.S
)
_RELATED_RE = re.compile(
    r"(?:See also|Related properties|Related)[:\s]*(.*?)" + _SECTION_END, re.I | re.S
)
_CODE_FENCE_RE = re.compile(r"```[\s\S]*?```")
_BASELINE_RE = re.compile(
    r"Baseline\s*(?:\d{4}\s*)?(Widely available|Newly available)|(Limited availability)",
    re.I,
)
_RELATED_TOKEN_RE = re.compile(r"[a-z]+(?:-[a-z]+)*")


def normalize_property_id(raw: str) -> str:
    """Canonical cache/URL key for a property identifier.

    ``"display: grid-lanes"`` -> ``"display"``, ``":has()"`` -> ``":has"``,
    ``'commandfor="x"'`` -> ``"commandfor"``.  A leading run of ``:`` or ``@``
    belongs to the name.
    """
    text = raw.strip()
    body = text.lstrip(":@")
    prefix = text[: len(text) - len(body)]
    body = re.split(r"[:=]", body, maxsplit=1)[0].strip()
    name = prefix + body
    if name.endswith("()"):
        name = name[:-2]
    return name


def mdn_url_for(property_id: str, base_url: str = DEFAULT_MDN_BASE_URL) -> str:
    normalized = normalize_property_id(property_id).lower()
    if normalized in MDN_URL_OVERRIDES:
        return MDN_URL_OVERRIDES[normalized]
    return f"{base_url.rstrip('/')}/{normalized}"


def _clean_text(element) -> str:
    if not element:
        return ""
    return re.sub(r"\s+", " ", element.get_text(" ", strip=True)).strip()


def _extract_description(soup: BeautifulSoup, text: str) -> str:
    source = _clean_text(soup.find("p")) or text.strip()
    match = re.match(r"([^.]+\.)", source)
    if match:
        return re.sub(r"\s+", " ", match.group(1)).strip()
    first_line = source.splitlines()[0] if source else ""
    return first_line.strip()


def _extract_syntax(text: str, property_id: str) -> str:
    match = _SYNTAX_RE.search(text)
    if match:
        syntax = re.sub(r"```\w*\n?", "", match.group(1))
        syntax = re.sub(r"\n+", " ", syntax).strip()
        if syntax:
            return syntax
    return f"{property_id}: <value>"


def _extract_support(text: str, property_id: str) -> BrowserSupportRecord:
    match = _BROWSER_RE.search(text)
    if not match:
        raise DocumentationParseError(property_id, "no browser compatibility section")

    section = match.group(1).lower()
    if "check mdn" in section or "caniuse" in section:
        raise DocumentationParseError(property_id, "browser section has no versions")

    versions: Dict[str, int] = {}
    for browser in ("chrome", "firefox", "safari", "edge"):
        found = re.search(browser + r"[:\s]*(\d+)", section)
        if found:
            versions[browser] = int(found.group(1))

    if not all(b in versions for b in ("chrome", "firefox", "safari")):
        raise DocumentationParseError(property_id, "incomplete browser versions")

    chrome, firefox, safari = versions["chrome"], versions["firefox"], versions["safari"]
    if chrome <= 100 and firefox <= 100 and safari <= 15:
        overall = 95
    elif chrome <= 110 and firefox <= 110 and safari <= 16:
        overall = 90
    else:
        overall = 80

    return BrowserSupportRecord(
        overall_support=overall,
        is_default=False,
        browsers={name: BrowserVersion(version=f"{v}+") for name, v in versions.items()},
    )


def _extract_examples(soup: BeautifulSoup, text: str) -> List[str]:
    examples = [pre.get_text().strip() for pre in soup.find_all("pre")]
    if not examples:
        examples = [
            re.sub(r"```\w*\n?", "", block).strip()
            for block in _CODE_FENCE_RE.findall(text)
        ]
    return [e for e in examples if e][:5]


def _extract_related(text: str) -> List[str]:
    match = _RELATED_RE.search(text)
    if not match:
        return []
    tokens = _RELATED_TOKEN_RE.findall(match.group(1))
    related = [t for t in tokens if len(t) > 2 and "-" in t]
    return list(dict.fromkeys(related))


def _extract_baseline(text: str) -> Optional[Baseline]:
    match = _BASELINE_RE.search(text)
    if not match:
        return None
    if match.group(2):
        return Baseline.LIMITED_AVAILABILITY
    if match.group(1).lower().startswith("widely"):
        return Baseline.WIDELY_AVAILABLE
    return Baseline.NEWLY_AVAILABLE


def parse_documentation(content: str, property_id: str) -> PropertyDocumentation:
    """Parse an MDN page (HTML or plain text) into PropertyDocumentation.

    Raises DocumentationParseError when the page carries no usable browser
    version data.
    """
    soup = BeautifulSoup(content, "html.parser")
    for element in soup.find_all(["script", "style", "nav", "footer"]):
        element.decompose()
    text = soup.get_text("\n")

    support = _extract_support(text, property_id)
    return PropertyDocumentation(
        property=property_id,
        description=_extract_description(soup, text),
        syntax=_extract_syntax(text, property_id),
        examples=_extract_examples(soup, text),
        related_properties=_extract_related(text),
        support=support,
        baseline=_extract_baseline(text),
    )


class MDNClient:
    """Fetches and parses MDN reference pages.

    Pass an ``httpx.AsyncClient`` to share a connection pool (or to mock the
    transport in tests); otherwise a short-lived client is opened per fetch.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = DEFAULT_MDN_BASE_URL,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def url_for(self, property_id: str) -> str:
        return mdn_url_for(property_id, self.base_url)

    async def fetch_page(self, property_id: str) -> str:
        """GET the documentation page; raises on transport errors and non-2xx."""
        url = self.url_for(property_id)
        logger.debug("Fetching %s", url)
        if self._client is not None:
            resp = await self._client.get(url, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(
                follow_redirects=True,
                timeout=self.timeout,
                headers={"User-Agent": _USER_AGENT},
            ) as client:
                resp = await client.get(url)
        resp.raise_for_status()
        return resp.text

    async def fetch_documentation(self, property_id: str) -> PropertyDocumentation:
        key = normalize_property_id(property_id)
        content = await self.fetch_page(key)
        return parse_documentation(content, key)
