"""Tests for report exports"""
import csv
import json

import pytest

from draft_engine.core.models import AutoDraftConfig, Candidate, Position
from draft_engine.core.recommendations import RecommendationEngine
from draft_engine.core.tiers import TierBuilder
from draft_engine.exporters import ReportExporter


@pytest.fixture
def pool():
    return [Candidate(f"wr{i}", f"Receiver {i}", Position.WR, "MIA", adp=i) for i in range(1, 13)]


@pytest.fixture
def exporter(tmp_path):
    return ReportExporter(output_dir=tmp_path)


class TestReportExporter:
    """Test CSV and JSON exports"""

    def test_creates_directories(self, exporter, tmp_path):
        """Test latest and archive folders exist"""
        assert (tmp_path / 'latest').is_dir()
        assert (tmp_path / 'archive').is_dir()

    def test_export_tiers_wraps_long_tiers(self, exporter, pool):
        """Test tiers longer than ten candidates spill onto a second row"""
        exporter.export_tiers(TierBuilder().build_all(pool))

        with open(exporter.latest_dir / 'tiers.csv', newline='') as f:
            rows = list(csv.DictReader(f))

        assert rows[0]['Position'] == 'WR'
        assert rows[0]['Tier'] == '1'
        assert rows[0]['ADP Range'] == '1-12'
        assert rows[0]['Players'].count(',') == 9
        assert rows[1]['Position'] == ''
        assert rows[1]['Players'] == 'Receiver 11, Receiver 12'

    def test_export_recommendations(self, exporter, pool):
        """Test one row per recommendation"""
        recs = RecommendationEngine().get_recommendations(pool, [], 1, 16, AutoDraftConfig())
        filepath = exporter.export_recommendations(recs, 1)

        with open(filepath, newline='') as f:
            rows = list(csv.DictReader(f))

        assert len(rows) == len(recs)
        assert rows[0]['Player'] == 'Receiver 1'
        assert rows[0]['Pos Rank'] == 'WR1'

    def test_export_report(self, exporter):
        """Test JSON reports are wrapped with a timestamp"""
        exporter.export_report('grade_t1', {'efficiency_score': 88.5})

        with open(exporter.latest_dir / 'grade_t1.json') as f:
            data = json.load(f)

        assert data['report'] == {'efficiency_score': 88.5}
        assert 'generated' in data

    def test_cleanup_old_archives(self, exporter):
        """Test only the newest archives are kept"""
        for name in ('20250101_000000', '20250102_000000', '20250103_000000'):
            (exporter.archive_dir / name).mkdir()

        removed = exporter.cleanup_old_archives(keep_last=1)

        assert removed == ['20250102_000000', '20250101_000000']
        assert [d.name for d in exporter.archive_dir.iterdir()] == ['20250103_000000']
