# resumelens/services/scorer.py
"""
Rule-based resume scoring used when the n8n workflow is unreachable or
answers with something we can't use.

Every aspect is scored 0-100 and the overall score is the rounded mean of
all aspects. Aspect rules live in ASPECT_RULES as plain data so new
aspects don't need control-flow changes.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

# ========= Aspect keys =========
LENGTH          = "Length"
SKILLS          = "Skills"
EDUCATION       = "Education"
EXPERIENCE      = "Experience"
QUANTIFIED      = "QuantifiedAchievements"
ACTION_VERBS    = "ActionVerbs"
CONTACT_INFO    = "ContactInfo"
SUMMARY         = "ProfessionalSummary"
BULLET_POINTS   = "BulletPoints"
BUZZWORD_USAGE  = "BuzzwordUsage"

ASPECTS = (
    LENGTH, SKILLS, EDUCATION, EXPERIENCE, QUANTIFIED,
    ACTION_VERBS, CONTACT_INFO, SUMMARY, BULLET_POINTS, BUZZWORD_USAGE,
)

# ========= Word lists / patterns =========
ACTION_VERBS_LIST = (
    "led", "managed", "developed", "created", "implemented", "designed",
    "improved", "increased", "reduced", "achieved", "launched", "delivered",
)
BUZZWORDS = (
    "synergy", "go-getter", "team player", "hard worker", "detail-oriented",
    "self-starter", "results-driven", "think outside the box", "dynamic", "motivated",
)

EMAIL_PAT   = r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}"
PHONE_PAT   = r"\+?\d[\d\-\s()]{7,}\d"
CONTACT_PAT = re.compile(rf"{EMAIL_PAT}|{PHONE_PAT}|\b(?:phone|mobile|tel|contact)\b|linkedin", re.I)
QUANT_PAT   = re.compile(
    r"\d+(?:\.\d+)?\s?%"
    r"|[$€£]\s?\d[\d,]*(?:\.\d+)?\s?(?:k|m|bn|million|billion)?\b"
    r"|\b\d[\d,]*\+?\s+(?:projects|people|clients)\b",
    re.I,
)
BULLET_LINE_PAT = re.compile(r"^[ \t]*[-*•][ \t]*\S", re.M)


def _words(*terms: str) -> Tuple[re.Pattern, ...]:
    # "team player" also matches "team\nplayer" or "team  player"
    return tuple(
        re.compile(r"\b" + r"\s+".join(re.escape(p) for p in t.split()) + r"\b", re.I)
        for t in terms
    )


# ========= Report types =========
@dataclass(frozen=True)
class Finding:
    flag: str
    recommendation: str


@dataclass
class ScoreReport:
    overall_score: int
    aspect_scores: Dict[str, int]
    flags: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    insights: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "overallScore": self.overall_score,
            "aspectScores": dict(self.aspect_scores),
            "flags": list(self.flags),
            "recommendations": list(self.recommendations),
            "insights": dict(self.insights),
        }


# ========= Detector rules =========
@dataclass(frozen=True)
class PresenceRule:
    """100 when any trigger matches, 0 (plus the finding) otherwise."""
    aspect: str
    triggers: Tuple[re.Pattern, ...]
    missing: Finding


@dataclass(frozen=True)
class CountRule:
    """Counts case-insensitive regex hits in the text.

    distinct=True counts how many triggers matched at least once;
    otherwise every match of every trigger is counted.
    """
    aspect: str
    triggers: Tuple[re.Pattern, ...]
    curve: Callable[[int], int]
    weak: Finding
    flag_if: Callable[[int, int], bool]  # (score, hits)
    insight: str
    distinct: bool = False


@dataclass(frozen=True)
class LineRule:
    """Counts lines matching a multiline pattern."""
    aspect: str
    pattern: re.Pattern
    curve: Callable[[int], int]
    weak: Finding
    flag_if: Callable[[int, int], bool]
    insight: str


def reward(per_hit: int) -> Callable[[int], int]:
    return lambda hits: min(100, hits * per_hit)


def penalty(per_hit: int) -> Callable[[int], int]:
    return lambda hits: max(0, 100 - hits * per_hit)


def _below_half(score: int, hits: int) -> bool:
    return score < 50


TOO_SHORT = Finding(
    "Resume is too short",
    "Add more detail about your experience, projects and accomplishments.",
)
TOO_LONG = Finding(
    "Resume is too long",
    "Condense your resume to the most relevant one or two pages.",
)

ASPECT_RULES = (
    PresenceRule(SKILLS, _words("skills", "technologies", "tools", "programming", "languages"),
                 Finding("Missing skills section",
                         "Add a dedicated skills section listing your technical and soft skills.")),
    PresenceRule(EDUCATION, _words("education", "degree", "university", "college", "bachelor", "master", "diploma"),
                 Finding("Missing education section",
                         "Include your education background, degrees and certifications.")),
    PresenceRule(EXPERIENCE, _words("experience", "employment", "work history", "worked"),
                 Finding("Missing work experience",
                         "Describe your work experience with roles, companies and dates.")),
    CountRule(QUANTIFIED, (QUANT_PAT,), reward(20),
              Finding("Few quantified achievements",
                      "Quantify your impact with numbers, percentages or amounts."),
              _below_half, "quantifiedAchievements"),
    CountRule(ACTION_VERBS, _words(*ACTION_VERBS_LIST), reward(20),
              Finding("Weak use of action verbs",
                      "Start bullet points with strong action verbs such as led, developed or delivered."),
              _below_half, "actionVerbs", distinct=True),
    PresenceRule(CONTACT_INFO, (CONTACT_PAT,),
                 Finding("Missing contact information",
                         "Add an email address, phone number or LinkedIn profile.")),
    PresenceRule(SUMMARY, _words("summary", "objective", "profile", "about me"),
                 Finding("Missing professional summary",
                         "Open with a short professional summary tailored to the role.")),
    LineRule(BULLET_POINTS, BULLET_LINE_PAT, reward(10),
             Finding("Few bullet points",
                     "Use bullet points to make achievements easier to scan."),
             _below_half, "bulletPoints"),
    CountRule(BUZZWORD_USAGE, _words(*BUZZWORDS), penalty(10),
              Finding("Overuse of buzzwords",
                      "Replace generic buzzwords with concrete examples of your work."),
              lambda score, hits: hits > 2, "buzzwords", distinct=True),
)

GENERAL_BANDS = (
    (60, "Consider a comprehensive rewrite of your resume to strengthen its structure and content."),
    (80, "Focus on improving the flagged areas to make your resume more competitive."),
    (None, "Your resume is in good shape; only minor refinements are needed."),
)


# ========= Helpers =========
def word_count(text: str) -> int:
    # str.split() drops empty tokens, so empty or blank text counts 0 words
    return len((text or "").split())


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _length_score(words: int) -> Tuple[int, Optional[Finding]]:
    if 100 < words < 800:
        return 100, None
    if 50 < words < 1000:
        return 70, None
    if words <= 50:
        return 30, TOO_SHORT
    return 50, TOO_LONG


def _apply(rule, text: str) -> Tuple[int, int, Optional[Finding]]:
    """Returns (score, hits, finding-or-None) for one rule."""
    if isinstance(rule, PresenceRule):
        hit = any(t.search(text) for t in rule.triggers)
        return (100, 1, None) if hit else (0, 0, rule.missing)

    if isinstance(rule, CountRule):
        if rule.distinct:
            hits = sum(1 for t in rule.triggers if t.search(text))
        else:
            hits = sum(len(t.findall(text)) for t in rule.triggers)
    elif isinstance(rule, LineRule):
        hits = len(rule.pattern.findall(text))
    else:
        raise TypeError(f"unknown rule type: {type(rule).__name__}")

    score = max(0, min(100, rule.curve(hits)))
    return score, hits, (rule.weak if rule.flag_if(score, hits) else None)


def general_recommendation(overall: int) -> str:
    for upper, text in GENERAL_BANDS:
        if upper is None or overall < upper:
            return text
    return GENERAL_BANDS[-1][1]


# ========= PUBLIC: score_resume =========
def score_resume(resume_text: str) -> ScoreReport:
    """
    Pure function: resume text in, ScoreReport out.
    Never raises for str input; empty text yields a low-scoring report.
    """
    text = resume_text or ""
    words = word_count(text)

    scores: Dict[str, int] = {}
    flags: List[str] = []
    recs: List[str] = []
    insights: Dict[str, int] = {"wordCount": words}

    def note(finding: Optional[Finding]):
        if finding:
            flags.append(finding.flag)
            recs.append(finding.recommendation)

    scores[LENGTH], finding = _length_score(words)
    note(finding)

    for rule in ASPECT_RULES:
        score, hits, finding = _apply(rule, text)
        scores[rule.aspect] = score
        if isinstance(rule, (CountRule, LineRule)):
            insights[rule.insight] = hits
        note(finding)

    overall = round_half_up(sum(scores.values()) / len(scores))
    recs.append(general_recommendation(overall))

    return ScoreReport(
        overall_score=overall,
        aspect_scores=scores,
        flags=flags,
        recommendations=recs,
        insights=insights,
    )
