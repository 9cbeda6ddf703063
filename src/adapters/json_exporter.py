"""JSON export of the status report.

Why JSON:
- Lets scripts and monitoring consume the same data the tables show.
- Decimal amounts are kept as strings so no precision is lost.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.services.status_pipeline import StatusReport


def report_to_json(report: StatusReport) -> str:
    """Serialize ``report`` with stable key order."""

    return json.dumps(report.to_payload(), ensure_ascii=False, indent=2, sort_keys=True)


def export_report_json(*, report: StatusReport, output_path: Path) -> Path:
    """Write ``report`` to ``output_path`` as UTF-8 JSON."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report_to_json(report) + "\n", encoding="utf-8")
    return output_path
