"""
Offer engine configuration: single source of truth for layout thresholds,
page chunk sizes and shared defaults.

Import from here in generators, pagination and the API layer rather than
hardcoding values.
"""
from __future__ import annotations

# ── Layout thresholds ──────────────────────────────────────────────────────────

# Explanations stay on the last table page while the document holds at most
# this many line items; above it they move to a trailing explanation page.
EXPLANATIONS_INLINE_MAX_ITEMS: int = 8

# Individual (per-visa / per-child) breakdown tables per page
INDIVIDUAL_VISAS_PER_PAGE: int = 2

# Dependent visa tables per page when no special rule applies
DEPENDENT_TABLES_PER_PAGE: int = 2

# Child tables per page once visa cancellation lengthens each table
CHILDREN_PER_PAGE_WITH_CANCELLATION: int = 3

# Family visa document: spouse on page 1, at most this many children per page
FAMILY_VISA_CHILDREN_PER_PAGE: int = 2


# ── Currency ───────────────────────────────────────────────────────────────────

PRIMARY_CURRENCY: str = "AED"
DEFAULT_SECONDARY_CURRENCY: str = "EUR"


# ── Authority display names ────────────────────────────────────────────────────

IFZA_AUTHORITY_NAME: str = "IFZA (International Free Zone Authority)"
DET_AUTHORITY_NAME: str = "DET (Dubai Department of Economy and Tourism)"

CORPORATE_SETUP: str = "Corporate Setup"
INDIVIDUAL_SETUP: str = "Individual Setup"


# ── Health insurance tiers ─────────────────────────────────────────────────────

NO_INSURANCE: str = "No Insurance"
LOW_COST_INSURANCE: str = "Low Cost"
SILVER_INSURANCE: str = "Silver Package"


# ── Issuing companies ──────────────────────────────────────────────────────────

# Filename abbreviation per issuing company
COMPANY_ABBREVIATIONS: dict[str, str] = {
    "tme-fzco": "FZCO",
    "management-consultants": "MGT",
}
