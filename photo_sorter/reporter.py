"""Reporting and statistics for sorting runs."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from .sorter import SortStats
from .utils import ensure_directory, format_bytes

logger = logging.getLogger(__name__)


class SortReporter:
    """Generates reports for a sorting run."""

    def __init__(self, source: Union[str, Path], destination: Union[str, Path]):
        self.source = Path(source)
        self.destination = Path(destination)

    def generate_summary_report(self, stats: SortStats) -> str:
        """
        Generate human-readable summary report.

        Args:
            stats: Statistics from PhotoSorter.sort()

        Returns:
            Formatted summary report
        """
        report = []
        report.append("=" * 50)
        report.append("PHOTO SORTER SUMMARY REPORT")
        report.append("=" * 50)
        report.append(f"Started: {stats.started}")
        report.append(f"Completed: {stats.finished or 'Unknown'}")
        report.append(f"Source: {self.source}")
        report.append(f"Destination: {self.destination}")
        report.append("")

        report.append("=== FILE STATISTICS ===")
        report.append(f"• Files found: {stats.files_found:,}")
        report.append(f"• Folders processed: {stats.buckets:,}")
        report.append(f"• Files moved: {stats.files_moved:,} ({format_bytes(stats.bytes_moved)})")
        report.append(f"• Already in destination, deleted: {stats.destination_duplicates:,}")
        report.append(f"• Source duplicates deleted: {stats.source_duplicates:,}")
        report.append(f"• Do not move files deleted: {stats.do_not_move_deleted:,}")
        report.append(f"• Empty files skipped: {stats.empty_skipped:,}")
        report.append(f"• Empty source folders removed: {stats.directories_removed:,}")
        report.append("")

        if stats.errors:
            report.append(f"=== ERRORS ({len(stats.errors)}) ===")
            for error in stats.errors[:10]:
                report.append(f"• {error}")
            if len(stats.errors) > 10:
                report.append(f"• ... and {len(stats.errors) - 10} more errors")
            report.append("")

        report.append("=" * 50)
        return "\n".join(report)

    def save_report(self, stats: SortStats, report_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Save detailed report as JSON.

        Args:
            stats: Statistics from PhotoSorter.sort()
            report_path: Where to write, defaults to the working directory

        Returns:
            Path of the written report
        """
        if report_path is None:
            stamp = (stats.finished or stats.started).replace(':', '-')
            report_path = Path.cwd() / f"photo_sorter_report_{stamp}.json"
        report_path = Path(report_path)
        ensure_directory(report_path.parent)

        data = {
            'source': str(self.source),
            'destination': str(self.destination),
            'statistics': stats.to_dict(),
        }
        with open(report_path, 'w') as f:
            json.dump(data, f, indent=2)

        logger.info(f"Report saved: {report_path}")
        return report_path
