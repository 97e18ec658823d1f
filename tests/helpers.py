"""Builders for DMARC rows, reports and aggregate XML used across the tests."""

from dmarc_analyzer.analysis.models import DateRange, DmarcReport, DmarcRow, PublishedPolicy

BEGIN = 1700000000  # 2023-11-14 22:13:20 UTC
ONE_DAY_END = BEGIN + 86399


def make_row(source_ip='203.0.113.5', count=1, disposition='none', dkim='pass', spf='pass',
             header_from='example.com', reason=None, comment=None):
    return DmarcRow(
        source_ip=source_ip,
        count=count,
        disposition=disposition,
        dkim=dkim,
        spf=spf,
        header_from=header_from,
        reason=reason,
        comment=comment,
    )


def make_report(rows=(), domain='example.com', org_name='google.com', report_id='r1',
                begin=BEGIN, end=ONE_DAY_END, source_zip='report.zip', source_file='report.xml'):
    return DmarcReport(
        source_zip=source_zip,
        source_file=source_file,
        domain=domain,
        org_name=org_name,
        email='noreply-dmarc-support@google.com',
        report_id=report_id,
        date_range=DateRange(begin=begin, end=end),
        policy=PublishedPolicy(domain=domain),
        records=tuple(rows),
    )


AGGREGATE_XML = """<?xml version="1.0" encoding="UTF-8" ?>
<feedback>
  <report_metadata>
    <org_name>{org_name}</org_name>
    <email>noreply-dmarc-support@google.com</email>
    <report_id>{report_id}</report_id>
    <date_range>
      <begin>{begin}</begin>
      <end>{end}</end>
    </date_range>
  </report_metadata>
  <policy_published>
    <domain>example.com</domain>
    <adkim>r</adkim>
    <aspf>r</aspf>
    <p>quarantine</p>
    <pct>100</pct>
  </policy_published>
  <record>
    <row>
      <source_ip>209.85.220.41</source_ip>
      <count>3</count>
      <policy_evaluated>
        <disposition>none</disposition>
        <dkim>pass</dkim>
        <spf>pass</spf>
      </policy_evaluated>
    </row>
    <identifiers>
      <header_from>example.com</header_from>
    </identifiers>
    <auth_results>
      <dkim>
        <domain>example.com</domain>
        <result>pass</result>
      </dkim>
      <spf>
        <domain>example.com</domain>
        <result>pass</result>
      </spf>
    </auth_results>
  </record>
  <record>
    <row>
      <source_ip>198.51.100.7</source_ip>
      <count>2</count>
      <policy_evaluated>
        <disposition>quarantine</disposition>
        <dkim>fail</dkim>
        <spf>fail</spf>
        <reason>
          <type>forwarded</type>
          <comment>looks forwarded</comment>
        </reason>
      </policy_evaluated>
    </row>
    <identifiers>
      <header_from>news.example.com</header_from>
    </identifiers>
    <auth_results>
      <spf>
        <domain>bounce.example.net</domain>
        <result>fail</result>
      </spf>
    </auth_results>
  </record>
</feedback>
"""


def make_xml(org_name='google.com', report_id='r1', begin=BEGIN, end=ONE_DAY_END):
    return AGGREGATE_XML.format(org_name=org_name, report_id=report_id, begin=begin, end=end).encode('utf-8')
