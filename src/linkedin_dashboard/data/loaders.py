import base64
from typing import Any, Dict, List

# Shown before the user uploads anything.
SAMPLE_IMPRESSIONS: List[Dict[str, Any]] = [
    {"date": "2023-05-01", "value": 1000, "url": "https://example.com/post1"},
    {"date": "2023-05-02", "value": 1200, "url": "https://example.com/post2"},
    {"date": "2023-05-03", "value": 800, "url": "https://example.com/post3"},
    {"date": "2023-05-04", "value": 1500, "url": "https://example.com/post4"},
    {"date": "2023-05-05", "value": 2000, "url": "https://example.com/post5"},
]

SAMPLE_ENGAGEMENT: List[Dict[str, Any]] = [
    {"date": "2023-05-01", "value": 65, "url": "https://example.com/post1"},
    {"date": "2023-05-02", "value": 103, "url": "https://example.com/post2"},
    {"date": "2023-05-03", "value": 157, "url": "https://example.com/post3"},
    {"date": "2023-05-04", "value": 81, "url": "https://example.com/post4"},
    {"date": "2023-05-05", "value": 117, "url": "https://example.com/post5"},
]


def parse_csv_text(text: str) -> List[Dict[str, str]]:
    """
    Split comma-separated text into one dict per data line.

    The first non-empty line supplies the field names. Values are matched to
    headers by position and trimmed; a short line pads with "". Quoting is not
    supported. Rows where every value is empty are dropped.
    """
    lines = [ln for ln in str(text or "").split("\n") if ln.strip()]
    if not lines:
        return []

    headers = [h.strip() for h in lines[0].split(",")]
    rows: List[Dict[str, str]] = []
    for line in lines[1:]:
        values = line.split(",")
        row: Dict[str, str] = {}
        for i, header in enumerate(headers):
            value = values[i] if i < len(values) else ""
            row[header] = value.strip() if value else ""
        if any(v != "" for v in row.values()):
            rows.append(row)
    return rows


def decode_upload_contents(contents: str | None) -> str:
    """Decode a dcc.Upload data URL ("data:<mime>;base64,<payload>") to text."""
    if not contents:
        raise ValueError("No file content provided.")
    if "," not in contents:
        raise ValueError("Invalid upload payload.")
    _meta, b64 = contents.split(",", 1)
    raw = base64.b64decode(b64)
    for enc in ("utf-8-sig", "utf-8", "cp1252", "latin-1"):
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    raise UnicodeDecodeError("utf-8", raw, 0, 1, "Unable to decode uploaded text content.")


def is_csv_filename(filename: str | None) -> bool:
    return str(filename or "").strip().lower().endswith(".csv")
