"""Application service that runs the aggregate -> rank -> render pipeline."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List

from ad_aggregator.application.aggregation_service import run_aggregation
from ad_aggregator.application.reporting.frames import build_report_frame, build_values_frame
from ad_aggregator.config import RunConfig
from ad_aggregator.domain.models import CampaignMetrics
from ad_aggregator.domain.store import MetricsStore
from ad_aggregator.infrastructure.excel_repository import write_workbook
from ad_aggregator.infrastructure.report_exporter import StagedOutputs, write_report_csv, write_summary_json
from ad_aggregator.ingestion import IngestStats

CTR_SHEET = "top_ctr"
CPA_SHEET = "top_cpa"


@dataclass(frozen=True)
class RankedReports:
    top_ctr: List[CampaignMetrics]
    top_cpa: List[CampaignMetrics]


@dataclass
class RunResult:
    campaigns: int
    stats: IngestStats
    reports: RankedReports
    written: List[Path] = field(default_factory=list)
    stage_timings: List[tuple[str, float]] = field(default_factory=list)
    total_elapsed: float = 0.0


def rank_campaigns(store: MetricsStore, top_k: int) -> RankedReports:
    return RankedReports(top_ctr=store.top_k_by_ctr(top_k), top_cpa=store.top_k_by_cpa(top_k))


def build_run_summary(
    config: RunConfig, result: RunResult, elapsed_before_commit: float | None = None
) -> Dict[str, Any]:
    """JSON-ready run summary.

    The summary is itself one of the staged artifacts, so its timings stop
    at stage_reports: commit_reports and the final total are only known
    after it is written and appear on stderr instead.
    """
    summary: Dict[str, Any] = {
        "input_path": str(config.input_path),
        "top_k": config.top_k,
        "on_bad_row": config.on_bad_row,
        "campaigns": result.campaigns,
        "rows_read": result.stats.rows_read,
        "rows_aggregated": result.stats.rows_aggregated,
        "rows_skipped": result.stats.rows_skipped,
        "skipped_errors": list(result.stats.skipped_errors),
        "reports": {
            "ctr": str(config.ctr_report_path),
            "cpa": str(config.cpa_report_path),
        },
        "top_ctr_campaigns": [metrics.campaign_id for metrics in result.reports.top_ctr],
        "top_cpa_campaigns": [metrics.campaign_id for metrics in result.reports.top_cpa],
    }
    if config.excel_path is not None:
        summary["reports"]["excel"] = str(config.excel_path)
    if config.benchmark:
        summary["stage_timings"] = {name: round(seconds, 6) for name, seconds in result.stage_timings}
        if elapsed_before_commit is not None:
            summary["elapsed_before_commit"] = round(elapsed_before_commit, 6)
    return summary


def run_reporting_pipeline(config: RunConfig) -> RunResult:
    pipeline_start = perf_counter()
    stage_start = pipeline_start
    stage_timings: list[tuple[str, float]] = []

    def _mark(stage_name: str) -> None:
        nonlocal stage_start
        now = perf_counter()
        stage_timings.append((stage_name, now - stage_start))
        stage_start = now

    aggregation = run_aggregation(config.input_path, delimiter=config.delimiter, on_bad_row=config.on_bad_row)
    _mark("aggregate")
    if config.benchmark:
        print(f"benchmark: parsed {aggregation.stats.rows_read} data rows", file=sys.stderr)

    reports = rank_campaigns(aggregation.store, config.top_k)
    _mark("rank")

    ctr_frame = build_report_frame(reports.top_ctr)
    cpa_frame = build_report_frame(reports.top_cpa)
    _mark("build_frames")

    result = RunResult(
        campaigns=aggregation.store.size(),
        stats=aggregation.stats,
        reports=reports,
        stage_timings=stage_timings,
    )

    staged = StagedOutputs()
    try:
        staged.stage(config.ctr_report_path, lambda path: write_report_csv(path, ctr_frame))
        staged.stage(config.cpa_report_path, lambda path: write_report_csv(path, cpa_frame))
        if config.excel_path is not None:
            sheets = {
                CTR_SHEET: build_values_frame(reports.top_ctr),
                CPA_SHEET: build_values_frame(reports.top_cpa),
            }
            staged.stage(config.excel_path, lambda path: write_workbook(path, sheets))
        _mark("stage_reports")
        if config.summary_json_path is not None:
            summary = build_run_summary(config, result, perf_counter() - pipeline_start)
            staged.stage(config.summary_json_path, lambda path: write_summary_json(path, summary))
    except BaseException:
        staged.discard()
        raise
    result.written = staged.commit()
    _mark("commit_reports")
    result.total_elapsed = perf_counter() - pipeline_start

    print(
        "Summary prepared: "
        f"campaigns={result.campaigns}, "
        f"rows={result.stats.rows_read}, "
        f"skipped={result.stats.rows_skipped}, "
        f"top_ctr={len(reports.top_ctr)}, "
        f"top_cpa={len(reports.top_cpa)}"
    )
    if result.stats.rows_skipped:
        print(f"Skipped {result.stats.rows_skipped} malformed rows:", file=sys.stderr)
        for message in result.stats.skipped_errors:
            print(f"  {message}", file=sys.stderr)
    if config.benchmark:
        stage_text = ", ".join([f"{name}={seconds:.3f}s" for name, seconds in stage_timings])
        print(f"Stage Timing: {stage_text}", file=sys.stderr)
        print(f"Total Elapsed: {result.total_elapsed:.3f}s", file=sys.stderr)
    for path in result.written:
        print(f"Saved: {path}")
    return result
