# FILE: santa_core/aliases.py
from __future__ import annotations

ALIASES = {
    "name": ["Name", "Full Name", "Participant", "Giver"],
    "email": ["Email", "E-mail", "Mail", "Email Address"],
    "cannot_draw": ["cannotDraw", "CannotDraw", "cannot_draw", "Cannot Draw",
                    "Excludes", "Exclusions", "Exclude", "Blocked"],
}


def canonical_key(key) -> str | None:
    """Canonical field name for a record key, or None when unknown."""
    k = str(key).strip().lower()
    for canon, aliases in ALIASES.items():
        if k == canon.lower() or k in [alias.lower() for alias in aliases]:
            return canon
    return None


def map_record(record: dict):
    """
    Map a raw participant record to canonical keys using aliases.
    Returns (mapped_record, mapping_report); unknown keys are dropped from the
    record and reported as None.
    """
    mapping = {}
    mapped = {}
    for key, value in record.items():
        canon = canonical_key(key)
        mapping[key] = canon
        if canon is not None and canon not in mapped:
            mapped[canon] = value
    return mapped, mapping


def map_headers(df):
    """
    Rename DataFrame columns to canonical names using aliases.
    Returns (renamed_df, mapping_report).
    """
    mapping = {col: canonical_key(col) for col in df.columns}
    rename_cols = {col: canon for col, canon in mapping.items() if canon}
    return df.rename(columns=rename_cols), mapping
