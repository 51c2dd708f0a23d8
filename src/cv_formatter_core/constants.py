"""Shared constants and EHS rule tables for ehs-cv-formatter."""

from __future__ import annotations

# Bump when the structuring prompt changes
CV_STRUCTURER_PROMPT_VERSION = "v1"

# LLM token pricing (USD per 1M tokens)
TOKEN_PRICES: dict[str, dict[str, float]] = {
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "claude-3-haiku-20240307": {"input": 0.25, "output": 1.25},
    "gemini-1.5-flash": {"input": 0.075, "output": 0.30},
}

# --- Extraction ---

MIME_TYPE_FORMATS: dict[str, str] = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/vnd.ms-excel.sheet.macroenabled.12": "xlsx",
}

EXTENSION_FORMATS: dict[str, str] = {
    ".pdf": "pdf",
    ".docx": "docx",
    ".xlsx": "xlsx",
    ".xlsm": "xlsx",
}

# MIME types that carry no format information; the extension decides
GENERIC_MIME_TYPES = frozenset(
    {"", "application/octet-stream", "binary/octet-stream", "application/unknown"}
)

BULLET_GLYPHS = "•●▪◦‣"
SHEET_SEPARATOR = "---"
WORDS_PER_PAGE = 500
ROWS_PER_PAGE = 40

# --- Chunking ---

# ~12k tokens; above this the document is structured chunk by chunk
DEFAULT_CHUNKING_THRESHOLD = 48_000
DEFAULT_CHUNK_SIZE = 8_000
DEFAULT_CHUNK_OVERLAP = 1_000

# --- EHS standards ---

EHS_TYPOGRAPHY: dict[str, str] = {
    "font": "Palatino Linotype",
    "photoSize": "4.7cm",
    "dateFormat": "short",
}

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Lowercased month token -> 1-based month number
MONTH_TOKENS: dict[str, int] = {
    **{name.lower(): i for i, name in enumerate(MONTH_ABBREVIATIONS, start=1)},
    "january": 1, "february": 2, "march": 3, "april": 4, "june": 6,
    "july": 7, "august": 8, "september": 9, "sept": 9, "october": 10,
    "november": 11, "december": 12,
}

END_DATE_MARKERS = frozenset({"present", "current", "now", "ongoing", "to date", "today"})
PRESENT_LABEL = "Present"

# Stay lowercase inside titles unless they are the first word
TITLE_LOWERCASE_WORDS = frozenset(
    {"of", "in", "at", "on", "by", "for", "to", "with", "a", "an", "the"}
)

# Self-referential phrase -> professional residue ("" strips it entirely)
REDUNDANT_PHRASES: dict[str, str] = {
    "I am responsible for": "Responsible for",
    "I am in charge of": "In charge of",
    "I am accountable for": "Accountable for",
    "My role involves": "",
    "My responsibilities include": "",
    "I have experience in": "Experienced in",
    "I am experienced in": "Experienced in",
    "I am skilled in": "Skilled in",
    "I am proficient in": "Proficient in",
}

COMMON_MISTAKES: dict[str, str] = {
    "Principle": "Principal",
    "Discrete": "Discreet",
    "Stationary": "Stationery",
    "Compliment": "Complement",
}

# Personal-detail keys that must not appear on an EHS CV
INAPPROPRIATE_FIELDS = frozenset(
    {
        "age",
        "dob",
        "dateOfBirth",
        "birthDate",
        "birthday",
        "dependants",
        "dependents",
        "children",
        "maritalStatus",
        "marriage",
        "religion",
        "ethnicity",
        "nationality",
        "race",
        "politicalAffiliation",
        "politicalParty",
    }
)

COMPANY_SPECIAL_CASES: dict[str, str] = {
    "ibm": "IBM",
    "microsoft": "Microsoft",
    "google": "Google",
    "amazon": "Amazon",
    "apple": "Apple",
    "facebook": "Facebook",
    "netflix": "Netflix",
    "deloitte": "Deloitte",
    "pwc": "PwC",
    "ey": "EY",
    "kpmg": "KPMG",
}

DEGREE_SPECIAL_CASES: dict[str, str] = {
    "b.e": "B.E.",
    "b.e.": "B.E.",
    "b.tech": "B.Tech",
    "bachelor": "Bachelor",
    "m.e": "M.E.",
    "m.e.": "M.E.",
    "m.tech": "M.Tech",
    "master": "Master",
    "phd": "PhD",
    "ph.d": "PhD",
    "ph.d.": "PhD",
    "doctorate": "Doctorate",
    "mba": "MBA",
}

SKILL_SPECIAL_CASES: dict[str, str] = {
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "node.js": "Node.js",
    "react": "React",
    "mongodb": "MongoDB",
    "postgresql": "PostgreSQL",
    "aws": "AWS",
    "docker": "Docker",
    "git": "Git",
    "html": "HTML",
    "css": "CSS",
    "api": "API",
    "rest": "REST",
    "websocket": "WebSocket",
    "ldap": "LDAP",
    "nlp": "NLP",
    "ai": "AI",
    "sql": "SQL",
    "machine learning": "Machine Learning",
}

# Rule names recorded in audit.rulesApplied
RULE_DATE_NORMALIZATION = "date_normalization"
RULE_TITLE_CAPITALIZATION = "title_capitalization"
RULE_ENTITY_CAPITALIZATION = "entity_capitalization"
RULE_REDUNDANT_PHRASES = "redundant_phrase_removal"
RULE_COMMON_MISTAKES = "common_mistake_correction"
RULE_PII_REMOVAL = "pii_removal"
RULE_BULLET_CONVERSION = "bullet_conversion"
RULE_TYPOGRAPHY = "typography_standard"

DEFAULT_BULLET_SPLIT_THRESHOLD = 100
DEFAULT_COMPLIANCE_PENALTY = 10

# File naming
DEFAULT_FIRST_NAME = "Candidate"
DEFAULT_CANDIDATE_ID = "BH001"
DEFAULT_CLIENT_LABEL = "Client"
