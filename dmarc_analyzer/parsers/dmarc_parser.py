"""
DMARC Report Parser

This module handles the parsing of DMARC aggregate XML reports,
including extraction from various file formats (XML, gzip, zip) and
discovery of report files in a directory.
"""

import glob
import gzip
import logging
import os
import re
import zipfile
import zlib
import xml.etree.ElementTree as ET_stdlib  # for ParseError

from defusedxml import ElementTree as ET
from defusedxml.common import DefusedXmlException

from dmarc_analyzer.analysis.models import DateRange, DmarcReport, DmarcRow, PublishedPolicy
from dmarc_analyzer.utils.helpers import epoch_to_date

logger = logging.getLogger(__name__)

REPORT_FILE_PATTERNS = ['*.zip', '*.xml', '*.xml.gz']

# Archive names used by the large reporters; the named group is the begin timestamp
ZIP_FILENAME_PATTERNS = {
    'google': re.compile(r'google\.com!.*!(?P<timestamp>\d{10})!\d{10}'),
    'yahoo': re.compile(r'yahoo\.com-.*-(?P<timestamp>\d{10})-\d{10}'),
    'microsoft': re.compile(r'(microsoft\.com|outlook\.com)_.*_(?P<timestamp>\d{10})_\d{10}'),
}


class ReportParseError(ValueError):
    """Raised when a report document lacks a required element."""


def parse_zip_filename(reports_directory, filename):
    """
    Work out the reporter and report timestamp from an archive name.

    Args:
        reports_directory: Directory containing the file
        filename: Base name of the file

    Returns:
        dict: filename, path, timestamp (0 when unknown) and provider
    """
    base_name = os.path.basename(filename)
    for suffix in ('.zip', '.xml.gz', '.xml'):
        if base_name.endswith(suffix):
            base_name = base_name[:-len(suffix)]
            break

    for provider, regex in ZIP_FILENAME_PATTERNS.items():
        match = regex.search(base_name)
        if match:
            return {
                'filename': filename,
                'path': os.path.join(reports_directory, filename),
                'timestamp': int(match.group('timestamp')),
                'provider': provider,
            }

    return {
        'filename': filename,
        'path': os.path.join(reports_directory, filename),
        'timestamp': 0,
        'provider': 'unknown',
    }


def extract_xml_documents(filepath):
    """
    Extract XML documents from a file, handling different compression formats.

    Args:
        filepath: Path to the DMARC report file (can be .xml, .gz, or .zip)

    Yields:
        tuple: (document file name, XML content as bytes)
    """
    if filepath.endswith('.zip'):
        with zipfile.ZipFile(filepath, 'r') as zip_ref:
            for info in zip_ref.infolist():
                if info.is_dir():
                    continue
                data = zip_ref.read(info)
                if info.filename.endswith('.gz'):
                    data = gzip.decompress(data)
                yield os.path.basename(info.filename), data
    elif filepath.endswith('.gz'):
        with gzip.open(filepath, 'rb') as f:
            yield os.path.basename(filepath), f.read()
    elif filepath.endswith('.xml'):
        with open(filepath, 'rb') as f:
            yield os.path.basename(filepath), f.read()


def _strip_namespaces(root):
    # newer reports declare xmlns="urn:ietf:params:xml:ns:dmarc-2.0"
    for elem in root.iter():
        if isinstance(elem.tag, str) and '}' in elem.tag:
            elem.tag = elem.tag.split('}', 1)[1]


def _text(elem, path, default=None):
    if elem is None:
        return default
    found = elem.find(path)
    if found is None or found.text is None:
        return default
    return found.text.strip()


def _required(elem, path, what):
    value = _text(elem, path)
    if value is None:
        raise ReportParseError(f"missing {what}")
    return value


def _parse_int(value, what):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ReportParseError(f"invalid {what}: {value!r}") from None


def _parse_row(record_elem):
    row_elem = record_elem.find('row')
    policy_evaluated = row_elem.find('policy_evaluated') if row_elem is not None else None
    identifiers = record_elem.find('identifiers')
    auth_results = record_elem.find('auth_results')

    count = _parse_int(_required(row_elem, 'count', 'row count'), 'row count')
    if count < 0:
        raise ReportParseError(f"negative row count: {count}")

    return DmarcRow(
        source_ip=_text(row_elem, 'source_ip', 'Unknown'),
        count=count,
        disposition=_text(policy_evaluated, 'disposition', 'none'),
        dkim=_text(policy_evaluated, 'dkim', 'fail'),
        spf=_text(policy_evaluated, 'spf', 'fail'),
        header_from=_text(identifiers, 'header_from', 'Unknown'),
        envelope_from=_text(identifiers, 'envelope_from'),
        dkim_domain=_text(auth_results, 'dkim/domain'),
        spf_domain=_text(auth_results, 'spf/domain'),
        reason=_text(policy_evaluated, 'reason/type'),
        comment=_text(policy_evaluated, 'reason/comment'),
    )


def parse_dmarc_report(xml_content, source_zip=None, source_file=None):
    """
    Parse DMARC report XML content and extract relevant information.

    Args:
        xml_content: XML content as string or bytes
        source_zip: Name of the archive the document came from
        source_file: Name of the XML document

    Returns:
        DmarcReport: Structured data extracted from the report, or None if parsing failed
    """
    if not xml_content:
        return None

    try:
        root = ET.fromstring(xml_content)
        _strip_namespaces(root)

        metadata = root.find('report_metadata')
        policy_elem = root.find('policy_published')
        if metadata is None or policy_elem is None:
            raise ReportParseError("missing report_metadata or policy_published")

        begin = _parse_int(_required(metadata, 'date_range/begin', 'date range'), 'date range begin')
        end = _parse_int(_required(metadata, 'date_range/end', 'date range'), 'date range end')
        if begin > end:
            raise ReportParseError(f"date range begins after it ends ({begin} > {end})")

        domain = _required(policy_elem, 'domain', 'policy domain')
        p = _text(policy_elem, 'p', 'none')
        policy = PublishedPolicy(
            domain=domain,
            adkim=_text(policy_elem, 'adkim', 'r'),
            aspf=_text(policy_elem, 'aspf', 'r'),
            p=p,
            sp=_text(policy_elem, 'sp', p),
            pct=_parse_int(_text(policy_elem, 'pct', '100'), 'pct'),
        )

        records = tuple(_parse_row(record_elem) for record_elem in root.findall('record'))

        return DmarcReport(
            source_zip=source_zip,
            source_file=source_file,
            domain=domain,
            org_name=_text(metadata, 'org_name', 'Unknown'),
            email=_text(metadata, 'email', 'Unknown'),
            report_id=_text(metadata, 'report_id', 'Unknown'),
            date_range=DateRange(begin=begin, end=end),
            policy=policy,
            records=records,
        )

    except (ET_stdlib.ParseError, DefusedXmlException) as e:
        logger.error("Error parsing XML in %s: %s", source_file or source_zip, e)
        return None
    except ReportParseError as e:
        logger.error("Invalid DMARC report %s: %s", source_file or source_zip, e)
        return None


def find_report_files(reports_directory):
    """List candidate report files in a directory, without duplicates."""
    report_files = []
    for pattern in REPORT_FILE_PATTERNS:
        report_files.extend(sorted(glob.glob(os.path.join(reports_directory, pattern))))
    return list(dict.fromkeys(report_files))


def load_reports(reports_directory, sort_by_timestamp=True):
    """
    Load and parse every DMARC report in a directory.

    Files that cannot be read are logged and skipped.

    Args:
        reports_directory: Directory containing DMARC report files
        sort_by_timestamp: Order files by the timestamp in their name

    Returns:
        list: DmarcReport objects
    """
    report_files = find_report_files(reports_directory)
    logger.info("Found %d potential DMARC report files", len(report_files))

    file_infos = [parse_zip_filename(reports_directory, os.path.basename(path)) for path in report_files]
    if sort_by_timestamp:
        file_infos.sort(key=lambda info: info['timestamp'])

    reports = []
    for file_info in file_infos:
        date_str = epoch_to_date(file_info['timestamp']) if file_info['timestamp'] > 0 else 'unknown'
        logger.info("Processing %s (%s, %s)", file_info['filename'], file_info['provider'], date_str)

        source_zip = file_info['filename'] if file_info['filename'].endswith('.zip') else None
        try:
            for document_name, xml_content in extract_xml_documents(file_info['path']):
                report = parse_dmarc_report(xml_content, source_zip, document_name)
                if report is None:
                    continue
                reports.append(report)
                logger.info("Parsed report %s from %s", report.report_id, report.org_name)
        except (OSError, EOFError, zlib.error, zipfile.BadZipFile) as e:
            logger.error("Failed to process %s: %s", file_info['filename'], e)

    return reports
