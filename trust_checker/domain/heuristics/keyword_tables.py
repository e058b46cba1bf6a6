"""Keyword and pattern tables used by the heuristic trust engine."""

import re
from typing import Dict, List, Pattern, Tuple

from pydantic import BaseModel


class CategoryKeywords(BaseModel):
    """Topic keywords with the multiplier applied to the topic's raw score."""

    primary: Tuple[str, ...]
    secondary: Tuple[str, ...]
    weight: float = 1.0

    class Config:
        """Pydantic model configuration."""
        frozen = True


class Indicator(BaseModel):
    """A compiled pattern with a signed score contribution."""

    pattern: Pattern[str]
    score: float
    label: str

    class Config:
        """Pydantic model configuration."""
        frozen = True


def _indicator(regex: str, score: float, label: str, flags: int = re.IGNORECASE) -> Indicator:
    return Indicator(pattern=re.compile(regex, flags), score=score, label=label)


CATEGORY_KEYWORDS: Dict[str, CategoryKeywords] = {
    "politics": CategoryKeywords(
        primary=(
            "election", "government", "minister", "parliament", "congress", "senate",
            "political party", "legislation", "policy", "vote", "president",
            "prime minister", "democratic", "republican", "campaign",
        ),
        secondary=(
            "politician", "governance", "administration", "cabinet", "referendum",
            "ballot", "constituency",
        ),
        weight=1.0,
    ),
    "health": CategoryKeywords(
        primary=(
            "disease", "medical", "doctor", "hospital", "covid", "vaccine", "treatment",
            "patient", "diagnosis", "health", "pandemic", "epidemic", "clinical trial",
            "medication", "symptoms",
        ),
        secondary=(
            "medicine", "clinic", "healthcare", "physician", "surgery", "therapy",
            "prescription",
        ),
        weight=1.0,
    ),
    "science": CategoryKeywords(
        primary=(
            "research", "study", "scientist", "discovery", "experiment", "peer review",
            "journal", "publication", "hypothesis", "theory", "data analysis", "laboratory",
        ),
        secondary=("academic", "researcher", "findings", "methodology", "evidence"),
        weight=0.9,
    ),
    "technology": CategoryKeywords(
        primary=(
            "software", "app", "artificial intelligence", "machine learning", "startup",
            "tech company", "algorithm", "programming", "cyber", "digital", "innovation",
        ),
        secondary=("technology", "coding", "developer", "platform", "device", "gadget"),
        weight=0.9,
    ),
    "economy": CategoryKeywords(
        primary=(
            "economy", "market", "stock", "gdp", "inflation", "recession", "financial",
            "trade", "investment", "interest rate", "central bank", "fiscal",
        ),
        secondary=("business", "revenue", "profit", "loss", "economic growth", "unemployment"),
        weight=1.0,
    ),
    "climate": CategoryKeywords(
        primary=(
            "climate change", "global warming", "carbon emissions", "renewable energy",
            "sustainability", "greenhouse gas", "paris agreement", "fossil fuel",
        ),
        secondary=("climate", "environment", "pollution", "green energy", "carbon footprint"),
        weight=1.0,
    ),
    "sports": CategoryKeywords(
        primary=(
            "championship", "tournament", "league", "world cup", "olympics",
            "player transfer", "match result",
        ),
        secondary=(
            "sports", "game", "match", "player", "team", "score", "cricket", "football",
            "basketball",
        ),
        weight=0.7,
    ),
    "entertainment": CategoryKeywords(
        primary=("box office", "album release", "movie premiere", "awards ceremony", "celebrity"),
        secondary=("movie", "film", "actor", "actress", "music", "concert", "song", "hollywood"),
        weight=0.6,
    ),
    "education": CategoryKeywords(
        primary=(
            "education policy", "university ranking", "exam results", "school curriculum",
            "student admission",
        ),
        secondary=("education", "school", "university", "student", "teacher", "degree", "college"),
        weight=0.8,
    ),
    "legal": CategoryKeywords(
        primary=(
            "court ruling", "verdict", "lawsuit", "supreme court", "legal case",
            "prosecution", "defense",
        ),
        secondary=("court", "judge", "law", "legal", "attorney", "justice", "trial"),
        weight=0.9,
    ),
    "space": CategoryKeywords(
        primary=(
            "space mission", "rocket launch", "satellite", "astronaut", "mars mission",
            "nasa", "spacex",
        ),
        secondary=("space", "rocket", "moon", "orbit", "spacecraft", "cosmos"),
        weight=0.8,
    ),
    "cybersecurity": CategoryKeywords(
        primary=(
            "data breach", "cyber attack", "ransomware", "hacking incident",
            "security vulnerability",
        ),
        secondary=("hack", "malware", "phishing", "encryption", "cybersecurity"),
        weight=0.9,
    ),
}

_MONTHS = "january|february|march|april|may|june|july|august|september|october|november|december"

# Sentence-level signals that a span asserts something checkable
FACTUAL_INDICATORS: List[Indicator] = [
    _indicator(r"\d+%", 0.8, "percentage", 0),
    _indicator(r"\$\d+|\d+\s*(million|billion|trillion|thousand)", 0.9, "financial", 0),
    _indicator(r"\d+\s*(people|patients|cases|deaths|victims)", 0.9, "statistical", 0),
    _indicator(r"\b(19|20)\d{2}\b", 0.7, "year", 0),
    _indicator(rf"\b({_MONTHS})\s+\d{{1,2}},?\s+\d{{4}}", 0.8, "date"),
    _indicator(r"according to|as per|reported by|stated by|announced by", 0.9, "attributed"),
    _indicator(
        r"\b(study|research|report|survey|poll|investigation)\s+(found|showed|revealed|indicated|suggests)",
        0.95,
        "research",
    ),
    _indicator(r"\"[^\"]+\".*\b(said|stated|announced|declared)", 0.85, "quote"),
    _indicator(r"\b(increased|decreased|rose|fell|dropped|grew|declined|surged)\b", 0.7, "change"),
    _indicator(r"\b(confirmed|denied|approved|rejected|signed|passed|banned|authorized)", 0.8, "action"),
    _indicator(r"\b(higher|lower|more|less|greater|fewer|better|worse)\s+than\b", 0.75, "comparison"),
    _indicator(r"\b(causes|caused|linked to|associated with|correlation|effect|impact)\b", 0.8, "causal"),
]

OPINION_INDICATORS: List[Indicator] = [
    _indicator(
        r"\b(i think|i believe|in my opinion|seems like|probably|maybe|perhaps|might|could be)",
        -0.5,
        "hedging",
    ),
    _indicator(r"\b(beautiful|ugly|good|bad|terrible|wonderful|amazing)\b", -0.5, "subjective"),
]

POSITIVE_INDICATORS: List[Indicator] = [
    _indicator(r"according to|as per|cited by", 0.10, "has attribution"),
    _indicator(r"\b(study|research|report)\s+(found|showed|revealed)", 0.15, "references research"),
    _indicator(r"\bpeer[- ]reviewed\b", 0.20, "peer-reviewed source"),
    _indicator(r"\b(university|institute|agency|organization)\b", 0.08, "institutional source"),
    _indicator(r"\"[^\"]+\".*\b(said|stated|announced)", 0.12, "direct quote"),
    _indicator(r"\b(data|statistics|figures|numbers)\b", 0.08, "contains data"),
    _indicator(rf"\b\d{{1,2}}\s+({_MONTHS})\s+\d{{4}}\b", 0.07, "specific date"),
    _indicator(r"\d+(\.\d+)?%", 0.06, "specific percentage"),
    _indicator(r"\b(confirmed|verified|authenticated|validated)\b", 0.10, "verification language"),
]

NEGATIVE_INDICATORS: List[Indicator] = [
    _indicator(
        r"\b(shocking|unbelievable|secret|exposed|revealed|they don't want you to know)",
        -0.25,
        "sensational language",
    ),
    _indicator(r"\b(miracle|cure|breakthrough|revolutionary)\b", -0.15, "exaggeration"),
    _indicator(r"\b(always|never|everyone|nobody|all|none)\b", -0.10, "absolute claims"),
    _indicator(r"!!!|!!|\?\?", -0.15, "excessive punctuation"),
    _indicator(r"\b(i think|i believe|in my opinion|seems like|probably|maybe)\b", -0.20, "opinion/speculation"),
    _indicator(r"\b(claim|allegedly|reportedly|rumor|speculation)\b", -0.12, "unverified language"),
    _indicator(r"\b(anonymous|unnamed|undisclosed)\s+(source|official)", -0.15, "anonymous sources"),
]

RESEARCH_MENTION = re.compile(r"\b(study|research|report)\b", re.IGNORECASE)


def keyword_pattern(keyword: str) -> Pattern[str]:
    """Word-bounded, case-insensitive pattern for a literal keyword."""
    return re.compile(r"\b" + re.escape(keyword) + r"\b", re.IGNORECASE)
