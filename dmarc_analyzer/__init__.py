"""
DMARC Analyzer

A tool for aggregating DMARC XML reports into pass/fail statistics and an
HTML report with DNS record checks and recommendations.
"""

__version__ = '1.0.0'
__author__ = 'DMARC Analyzer Team'
