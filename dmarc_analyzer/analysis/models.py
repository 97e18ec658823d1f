"""
Data structures shared by the loader, the analyzer and the report generators.
"""

from dataclasses import dataclass, field
from typing import Optional

from dmarc_analyzer.utils.bigdecimal import ZERO, FixedPointDecimal


@dataclass(frozen=True)
class DateRange:
    begin: int
    end: int


@dataclass(frozen=True)
class PublishedPolicy:
    domain: str
    adkim: str = "r"
    aspf: str = "r"
    p: str = "none"
    sp: str = "none"
    pct: int = 100


@dataclass(frozen=True)
class DmarcRow:
    """One <record> of an aggregate report."""
    source_ip: str
    count: int
    disposition: str
    dkim: str
    spf: str
    header_from: str
    envelope_from: Optional[str] = None
    dkim_domain: Optional[str] = None
    spf_domain: Optional[str] = None
    reason: Optional[str] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class DmarcReport:
    """One parsed <feedback> document."""
    domain: str
    org_name: str
    email: str
    report_id: str
    date_range: DateRange
    policy: PublishedPolicy
    records: tuple = ()
    source_zip: Optional[str] = None
    source_file: Optional[str] = None


@dataclass(frozen=True)
class IpInfo:
    ip: str
    provider: str
    is_known_provider: bool
    risk_level: str


@dataclass(frozen=True)
class TrendPoint:
    date: str
    passed: int
    failed: int
    total: int
    pass_rate: str


@dataclass(frozen=True)
class TopFailingSource:
    ip: str
    count: int
    disposition: str
    provider: str
    is_known_provider: bool
    risk_level: str


@dataclass(frozen=True)
class FailureDetail:
    ip: str
    provider: str
    risk_level: str
    disposition: str
    count: int
    header_from: str
    dkim: str
    spf: str
    date_range: DateRange
    reason: Optional[str]
    comment: Optional[str]
    report_id: str
    source_zip: str
    source_file: str


@dataclass
class DomainAlignment:
    dkim_aligned: int = 0
    spf_aligned: int = 0
    both_aligned: int = 0
    arc_aligned: int = 0
    none_aligned: int = 0


@dataclass
class PassFailCount:
    passed: int = 0
    failed: int = 0


@dataclass
class AnalysisDateRange:
    earliest: Optional[int] = None
    latest: Optional[int] = None


@dataclass
class AnalysisResult:
    total_reports: int = 0
    total_messages: int = 0
    passed_messages: int = 0
    failed_messages: int = 0
    quarantined_messages: int = 0
    rejected_messages: int = 0
    domain_alignment: DomainAlignment = field(default_factory=DomainAlignment)
    unique_analyzed_domains: list = field(default_factory=list)
    domain_auth_records: list = field(default_factory=list)
    trends: list = field(default_factory=list)
    top_failing_sources: list = field(default_factory=list)
    failure_details: list = field(default_factory=list)
    failure_reasons: dict = field(default_factory=dict)
    subdomain_analysis: dict = field(default_factory=dict)
    volume_by_provider: dict = field(default_factory=dict)
    reporting_orgs: list = field(default_factory=list)
    date_range: AnalysisDateRange = field(default_factory=AnalysisDateRange)
    rates: dict = field(default_factory=dict)
    fail_ratio: FixedPointDecimal = ZERO
    quarantine_ratio: FixedPointDecimal = ZERO
