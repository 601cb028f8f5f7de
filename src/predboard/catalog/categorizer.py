"""Keyword-based market categorization.

Precedence is fixed: an upstream category wins, then the Politics and Economy
special lists, then the generic keyword-count matcher, then sports team names.
The special lists short-circuit the generic matcher, so a title mentioning both
"election" and "bitcoin" is Politics, not Crypto.
"""

from __future__ import annotations

from predboard.models.market import UNCATEGORIZED

# Insertion order breaks ties in the generic matcher.
CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "Sports": [
        "sports",
        "football",
        "soccer",
        "nfl",
        "nba",
        "mlb",
        "hockey",
        "tennis",
        "golf",
        "championship",
        "league",
        "tournament",
        "cup",
        "premier",
        "uefa",
        "world cup",
        "champion",
        "winner",
    ],
    "Politics": [
        "politics",
        "election",
        "president",
        "vote",
        "political",
        "democrat",
        "republican",
        "congress",
        "senate",
        "house",
        "government",
        "trump",
        "biden",
        "presidential",
    ],
    "Crypto": [
        "crypto",
        "bitcoin",
        "ethereum",
        "blockchain",
        "btc",
        "eth",
        "token",
        "coin",
        "defi",
        "nft",
        "web3",
    ],
    "New": [],  # date-derived, never keyword-matched
    "Economy": [
        "economy",
        "economic",
        "finance",
        "financial",
        "stock",
        "market",
        "gdp",
        "inflation",
        "recession",
        "fed",
        "interest rate",
    ],
}

DATE_DERIVED_CATEGORY = "New"

POLITICS_TERMS = (
    "trump",
    "biden",
    "war",
    "ukraine",
    "russia",
    "recession",
    "openai",
    "u.s.",
    "united states",
    "election",
    "government",
    "president",
    "congress",
    "senate",
    "house",
    "supreme court",
    "federal",
    "democracy",
    "democratic",
    "republican",
)

ECONOMY_TERMS = (
    "recession",
    "economy",
    "economic",
    "inflation",
    "fed",
    "interest rate",
    "gdp",
    "stock market",
    "financial",
    "finance",
)

SPORTS_TEAMS = (
    "arsenal",
    "manchester",
    "liverpool",
    "chelsea",
    "tottenham",
    "lakers",
    "celtics",
    "warriors",
    "bulls",
    "heat",
    "knicks",
    "yankees",
    "dodgers",
    "red sox",
    "cubs",
    "giants",
    "cowboys",
    "patriots",
    "eagles",
    "packers",
    "steelers",
)


def canonical_category(raw: str) -> str | None:
    """Vocabulary spelling of raw (case-insensitive), or None if it is not in the vocabulary."""
    lowered = raw.lower()
    for name in CATEGORY_KEYWORDS:
        if name.lower() == lowered:
            return name
    return None


def _keyword_counts(text: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    for name, keywords in CATEGORY_KEYWORDS.items():
        if name == DATE_DERIVED_CATEGORY:
            continue
        hits = sum(1 for kw in keywords if kw in text)
        if hits:
            counts[name] = hits
    return counts


def categorize_text(text: str) -> str:
    """Category for free text (title/question), ignoring any upstream category."""
    text = (text or "").lower()
    if any(term in text for term in POLITICS_TERMS):
        return "Politics"
    if any(term in text for term in ECONOMY_TERMS):
        return "Economy"
    counts = _keyword_counts(text)
    if counts:
        # max() keeps the first maximum, i.e. vocabulary order on ties
        return max(counts, key=lambda name: counts[name])
    if any(team in text for team in SPORTS_TEAMS):
        return "Sports"
    return UNCATEGORIZED


def categorize(raw_category: str | None, text: str) -> str:
    """Best-fit category: upstream category if given (canonically cased), else keyword heuristics."""
    if isinstance(raw_category, str) and raw_category.strip():
        return canonical_category(raw_category) or raw_category
    return categorize_text(text)
