"""CSV and JSON exports of tiers, recommendations and draft reports"""
import csv
import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from draft_engine.core.models import Position
from draft_engine.core.recommendations import Recommendation
from draft_engine.core.tiers import Tier
from config import OUTPUT_DIR


logger = logging.getLogger(__name__)

# Candidates listed per row of the tier sheet
TIER_ROW_WIDTH = 10


class ReportExporter:
    """Write reports to a timestamped archive folder, mirrored into 'latest'"""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = Path(output_dir) if output_dir else OUTPUT_DIR
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.latest_dir = self.output_dir / 'latest'
        self.latest_dir.mkdir(exist_ok=True)

        self.archive_dir = self.output_dir / 'archive'
        self.archive_dir.mkdir(exist_ok=True)

    def _get_export_dir(self) -> Tuple[Path, str]:
        """Get directory for current export with timestamp"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        export_dir = self.archive_dir / timestamp
        export_dir.mkdir(exist_ok=True)
        return export_dir, timestamp

    def _copy_to_latest(self, source_file: Path, filename: str) -> Path:
        dest_file = self.latest_dir / filename
        shutil.copy2(source_file, dest_file)
        return dest_file

    def export_tiers(self, tiers: Dict[Position, List[Tier]]) -> Path:
        """Tier sheet: one row per position tier, long tiers wrapped"""
        export_dir, timestamp = self._get_export_dir()
        filepath = export_dir / f"tiers_{timestamp}.csv"

        with open(filepath, 'w', newline='') as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=['Position', 'Tier', 'ADP Range', 'Players'])
            writer.writeheader()

            for position in Position:
                for number, tier in enumerate(tiers.get(position, []), 1):
                    names = [c.name for c in tier]
                    writer.writerow({
                        'Position': position.value,
                        'Tier': number,
                        'ADP Range': f"{tier[0].adp:g}-{tier[-1].adp:g}",
                        'Players': ', '.join(names[:TIER_ROW_WIDTH])
                    })

                    for i in range(TIER_ROW_WIDTH, len(names), TIER_ROW_WIDTH):
                        writer.writerow({
                            'Position': '',
                            'Tier': '',
                            'ADP Range': '',
                            'Players': ', '.join(names[i:i + TIER_ROW_WIDTH])
                        })

        self._copy_to_latest(filepath, 'tiers.csv')
        logger.info(f"Exported tiers for {sum(1 for t in tiers.values() if t)} positions")
        return filepath

    def export_recommendations(self, recommendations: List[Recommendation], current_pick: int) -> Path:
        export_dir, timestamp = self._get_export_dir()
        filepath = export_dir / f"recommendations_pick{current_pick}_{timestamp}.csv"

        fieldnames = [
            'Rank', 'Player', 'Position', 'Team', 'ADP', 'Type', 'Confidence',
            'Pos Rank', 'Tier', 'Left In Tier', 'Reasoning'
        ]

        with open(filepath, 'w', newline='') as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
            writer.writeheader()

            for i, rec in enumerate(recommendations, 1):
                writer.writerow({
                    'Rank': i,
                    'Player': rec.candidate.name,
                    'Position': rec.candidate.position.value,
                    'Team': rec.candidate.team,
                    'ADP': f"{rec.candidate.adp:g}" if rec.candidate.is_ranked else '',
                    'Type': rec.type.value,
                    'Confidence': f"{rec.confidence:.2f}",
                    'Pos Rank': f"{rec.candidate.position.value}{rec.position_rank}",
                    'Tier': rec.tier_info.tier,
                    'Left In Tier': rec.tier_info.players_left_in_tier,
                    'Reasoning': rec.reasoning
                })

        self._copy_to_latest(filepath, 'recommendations.csv')
        logger.info(f"Exported {len(recommendations)} recommendations for pick {current_pick}")
        return filepath

    def export_report(self, name: str, report: Dict) -> Path:
        """Any to_dict() report (analytics, snake analysis, keepers) as JSON"""
        export_dir, timestamp = self._get_export_dir()
        filepath = export_dir / f"{name}_{timestamp}.json"

        data = {
            'generated': datetime.now().isoformat(),
            'report': report
        }
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2, default=str)

        self._copy_to_latest(filepath, f"{name}.json")
        logger.info(f"Exported {name} report")
        return filepath

    def cleanup_old_archives(self, keep_last: int = 5) -> List[str]:
        """Remove all but the most recent archive folders"""
        archive_dirs = sorted((d for d in self.archive_dir.iterdir() if d.is_dir()), reverse=True)

        removed = []
        for old_dir in archive_dirs[keep_last:]:
            try:
                shutil.rmtree(old_dir)
                removed.append(old_dir.name)
                logger.info(f"Removed old archive: {old_dir.name}")
            except OSError as e:
                logger.warning(f"Could not remove {old_dir}: {e}")
        return removed
