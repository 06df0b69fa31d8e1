"""Report exporters for draft engine output"""
from .report_exporter import ReportExporter

__all__ = ['ReportExporter']
