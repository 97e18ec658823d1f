"""
SPF, DKIM and DMARC Record Parsing

Turns the raw TXT strings published in DNS into structured records.
Parsers never raise: an unusable record comes back with valid=False and an
error message.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ParsedSpfRecord:
    valid: bool
    error: Optional[str] = None
    version: Optional[str] = None
    mechanisms: list = field(default_factory=list)
    modifiers: dict = field(default_factory=dict)
    all: Optional[str] = None  # e.g. "-all", "~all"


@dataclass(frozen=True)
class ParsedDkimRecord:
    valid: bool
    error: Optional[str] = None
    version: Optional[str] = None
    key_type: Optional[str] = None
    public_key: Optional[str] = None
    raw_tags: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ParsedDmarcRecord:
    valid: bool
    error: Optional[str] = None
    version: Optional[str] = None
    policy: Optional[str] = None
    subdomain_policy: Optional[str] = None
    adkim: Optional[str] = None
    aspf: Optional[str] = None
    pct: Optional[str] = None
    rua: Optional[list] = None
    ruf: Optional[list] = None
    fo: Optional[str] = None
    raw_tags: dict = field(default_factory=dict)


@dataclass
class DomainAuthRecords:
    """Raw and parsed authentication records for one domain; None means absent."""
    domain: str
    spf: Optional[str] = None
    dkim: Optional[str] = None
    dmarc: Optional[str] = None
    spf_parsed: Optional[ParsedSpfRecord] = None
    dkim_parsed: Optional[ParsedDkimRecord] = None
    dmarc_parsed: Optional[ParsedDmarcRecord] = None


def _parse_tags(record):
    """Split a 'k=v; k=v' record into a dict with lower-cased keys."""
    tags = {}
    for part in record.strip().split(";"):
        part = part.strip()
        if not part:
            continue
        key, _, value = part.partition("=")
        key = key.strip()
        value = value.strip()
        if key and value:
            tags[key.lower()] = value
    return tags


def parse_spf_record(record):
    """
    Parse an SPF TXT record.

    Args:
        record: Raw record text, e.g. "v=spf1 include:_spf.google.com ~all"

    Returns:
        ParsedSpfRecord
    """
    parts = record.strip().split()

    if not parts or not parts[0].lower().startswith("v=spf1"):
        return ParsedSpfRecord(valid=False, error="Invalid SPF record (must start with v=spf1)")

    mechanisms = []
    modifiers = {}
    all_qualifier = None

    for token in parts[1:]:
        if token.endswith("all"):
            all_qualifier = token
            continue
        if "=" in token:
            key, _, value = token.partition("=")
            modifiers[key] = value
        else:
            mechanisms.append(token)

    return ParsedSpfRecord(
        valid=True,
        version="spf1",
        mechanisms=mechanisms,
        modifiers=modifiers,
        all=all_qualifier,
    )


def parse_dkim_record(record):
    """Parse a DKIM key record (v=DKIM1; k=rsa; p=...)."""
    tags = _parse_tags(record)

    if tags.get("v", "").upper() != "DKIM1":
        return ParsedDkimRecord(valid=False, error="Invalid DKIM record (must start with v=DKIM1)")
    if not tags.get("p"):
        return ParsedDkimRecord(valid=False, error="DKIM record missing public key (p=)")

    return ParsedDkimRecord(
        valid=True,
        version="DKIM1",
        key_type=tags.get("k", "rsa"),
        public_key=tags["p"],
        raw_tags=tags,
    )


def parse_dmarc_record(record):
    """Parse a DMARC policy record (v=DMARC1; p=...)."""
    tags = _parse_tags(record)

    if tags.get("v", "").upper() != "DMARC1":
        return ParsedDmarcRecord(valid=False, error="Invalid DMARC record (must start with v=DMARC1)")
    if not tags.get("p"):
        return ParsedDmarcRecord(valid=False, error="DMARC record missing policy (p=)")

    return ParsedDmarcRecord(
        valid=True,
        version="DMARC1",
        policy=tags["p"],
        subdomain_policy=tags.get("sp"),
        adkim=tags.get("adkim"),
        aspf=tags.get("aspf"),
        pct=tags.get("pct"),
        rua=tags["rua"].split(",") if "rua" in tags else None,
        ruf=tags["ruf"].split(",") if "ruf" in tags else None,
        fo=tags.get("fo"),
        raw_tags=tags,
    )
