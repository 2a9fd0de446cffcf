# santa_core/io.py
from __future__ import annotations
import io
import json
import logging
from pathlib import Path
from typing import Any, List, Sequence

import pandas as pd
import yaml
from pydantic import ValidationError

from .aliases import map_headers, map_record
from .errors import InputError
from .models import Participant

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["name", "email", "cannot_draw"]
CSV_LIST_SEP = ";"


def _split_names(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, float) and pd.isna(value):
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [s.strip() for s in str(value).split(CSV_LIST_SEP) if s.strip()]


def records_to_participants(records: Sequence[Any], source: str = "<records>") -> List[Participant]:
    """Build participants from raw records, keeping source order."""
    if not isinstance(records, (list, tuple)):
        raise InputError(f"{source}: expected a list of participant records")
    out: List[Participant] = []
    for idx, raw in enumerate(records):
        if not isinstance(raw, dict):
            raise InputError(f"{source}: record {idx} is not a mapping")
        rec, mapping = map_record(raw)
        ignored = [k for k, v in mapping.items() if v is None]
        if ignored:
            logger.debug("%s: record %d ignores keys %s", source, idx, ignored)
        if not str(rec.get("name") or "").strip():
            raise InputError(f"{source}: record {idx} has no name")
        try:
            out.append(Participant(
                name=rec["name"],
                email=rec.get("email") or "",
                cannot_draw=_split_names(rec.get("cannot_draw")),
            ))
        except ValidationError as exc:
            raise InputError(f"{source}: record {idx} is invalid: {exc}") from exc
    return out


def parse_json(text: str, source: str = "<json>") -> List[Participant]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputError(f"{source}: malformed JSON: {exc}") from exc
    return records_to_participants(data, source)


def parse_yaml(text: str, source: str = "<yaml>") -> List[Participant]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InputError(f"{source}: malformed YAML: {exc}") from exc
    if isinstance(data, dict) and "participants" in data:
        data = data["participants"]
    return records_to_participants(data or [], source)


def parse_csv(file_like, source: str = "<csv>") -> List[Participant]:
    """Columns: name, email, cannot_draw (names separated by ';'). Headers are alias-mapped."""
    try:
        df = pd.read_csv(file_like, dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise InputError(f"{source}: malformed CSV: {exc}") from exc
    df, _ = map_headers(df)
    missing = [c for c in ("name", "email") if c not in df.columns]
    if missing:
        raise InputError(f"{source}: missing required columns: {missing}")
    if "cannot_draw" not in df.columns:
        df["cannot_draw"] = ""
    records = df[CSV_COLUMNS].to_dict(orient="records")
    return records_to_participants(records, source)


def parse_participants(text: str, suffix: str, source: str = "<upload>") -> List[Participant]:
    """Parse participant text in the format named by a file suffix."""
    suffix = (suffix or "").lower()
    if not suffix.startswith("."):
        suffix = "." + suffix
    if suffix == ".json":
        return parse_json(text, source)
    if suffix in (".yaml", ".yml"):
        return parse_yaml(text, source)
    if suffix == ".csv":
        return parse_csv(io.StringIO(text), source)
    raise InputError(f"unsupported participant file type: {suffix}")


def load_participants(path) -> List[Participant]:
    """Load the participant list; the suffix picks the format (.json, .yaml/.yml, .csv)."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputError(f"cannot read participant file {p}: {exc}") from exc

    participants = parse_participants(text, p.suffix, str(p))
    logger.info("Loaded %d participants from %s", len(participants), p)
    return participants


def load_template(path) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as exc:
        raise InputError(f"cannot read message template {path}: {exc}") from exc


def participants_to_df(participants: Sequence[Participant]) -> pd.DataFrame:
    rows = [{
        "name": p.name,
        "email": p.email,
        "cannot_draw": CSV_LIST_SEP.join(p.cannot_draw),
    } for p in participants]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def assignment_to_df(participants: Sequence[Participant], assignment: Sequence[Participant]) -> pd.DataFrame:
    rows = [{
        "giver": giver.name,
        "giver_email": giver.email,
        "recipient": drawn.name,
    } for giver, drawn in zip(participants, assignment)]
    return pd.DataFrame(rows, columns=["giver", "giver_email", "recipient"])


def generate_template_csv_bytes() -> bytes:
    empty = pd.DataFrame(columns=CSV_COLUMNS)
    buf = io.StringIO()
    empty.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")
