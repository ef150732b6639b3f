"""Tests for the end-to-end aggregate -> rank -> render pipeline."""

import json

import pytest
from openpyxl import load_workbook

from ad_aggregator.application.aggregation_service import run_aggregation
from ad_aggregator.application.report_service import rank_campaigns, run_reporting_pipeline
from ad_aggregator.config import RunConfig
from ad_aggregator.infrastructure.report_exporter import ReportWriteError, StagedOutputs
from ad_aggregator.ingestion import MissingColumnsError, RowDecodeError

HEADER = "campaign_id,impressions,clicks,spend,conversions\n"


def _read_lines(path):
    return path.read_text(encoding="utf-8").strip().splitlines()


class TestRoundTrip:
    def test_sample_scenario(self, sample_csv):
        result = run_aggregation(sample_csv)
        assert result.store.size() == 2

        ranked = rank_campaigns(result.store, 1)
        assert [m.campaign_id for m in ranked.top_ctr] == ["camp1"]
        # Both CPAs are 10.0; the id tie-break picks camp1.
        assert [m.campaign_id for m in ranked.top_cpa] == ["camp1"]

    def test_writes_both_reports(self, sample_csv, tmp_path):
        out_dir = tmp_path / "out"
        config = RunConfig(input_path=sample_csv, output_dir=out_dir, top_k=10)
        result = run_reporting_pipeline(config)

        assert result.campaigns == 2
        assert set(result.written) == {out_dir / "top10_ctr.csv", out_dir / "top10_cpa.csv"}
        ctr_lines = _read_lines(out_dir / "top10_ctr.csv")
        assert ctr_lines[0] == "campaign_id,total_impressions,total_clicks,total_spend,total_conversions,ctr,cpa"
        assert ctr_lines[1] == "camp1,1000,100,500.00,50,0.100000,10.00"
        assert ctr_lines[2] == "camp2,2000,50,200.00,20,0.025000,10.00"
        cpa_lines = _read_lines(out_dir / "top10_cpa.csv")
        assert [line.split(",")[0] for line in cpa_lines[1:]] == ["camp1", "camp2"]

    def test_cpa_report_excludes_zero_conversions(self, write_csv, tmp_path):
        path = write_csv(HEADER + "a,100,10,50.00,10\nb,100,20,80.00,0\n")
        out_dir = tmp_path / "out"
        run_reporting_pipeline(RunConfig(input_path=path, output_dir=out_dir, top_k=5))

        cpa_lines = _read_lines(out_dir / "top5_cpa.csv")
        assert len(cpa_lines) == 2
        assert cpa_lines[1].startswith("a,")
        ctr_lines = _read_lines(out_dir / "top5_ctr.csv")
        assert ctr_lines[1] == "b,100,20,80.00,0,0.200000,"

    def test_top_k_bounds_report_rows(self, write_csv, tmp_path):
        body = "".join(f"c{idx},1000,{(idx + 1) * 10},10.00,1\n" for idx in range(5))
        path = write_csv(HEADER + body)
        out_dir = tmp_path / "out"
        run_reporting_pipeline(RunConfig(input_path=path, output_dir=out_dir, top_k=2))

        ctr_lines = _read_lines(out_dir / "top2_ctr.csv")
        assert [line.split(",")[0] for line in ctr_lines[1:]] == ["c4", "c3"]


class TestFailureKeepsPreviousOutput:
    """A failed run must not overwrite or add report artifacts."""

    def _good_run(self, sample_csv, out_dir):
        run_reporting_pipeline(RunConfig(input_path=sample_csv, output_dir=out_dir))
        return (out_dir / "top10_ctr.csv").read_text(encoding="utf-8")

    def test_bad_field(self, sample_csv, write_csv, tmp_path):
        out_dir = tmp_path / "out"
        before = self._good_run(sample_csv, out_dir)
        bad = write_csv(HEADER + "camp9,abc,1,1.00,1\n", name="bad.csv")

        with pytest.raises(RowDecodeError) as excinfo:
            run_reporting_pipeline(RunConfig(input_path=bad, output_dir=out_dir))
        assert excinfo.value.position == 2
        assert (out_dir / "top10_ctr.csv").read_text(encoding="utf-8") == before
        assert sorted(p.name for p in out_dir.iterdir()) == ["top10_cpa.csv", "top10_ctr.csv"]

    def test_unreadable_row(self, sample_csv, write_csv, tmp_path):
        out_dir = tmp_path / "out"
        before = self._good_run(sample_csv, out_dir)
        bad = write_csv(
            HEADER + "a,100,10,50.00,10\n" + "x" * 200000 + ",1,1,1.00,1\n" + "b,100,5,5.00,1\n",
            name="oversized.csv",
        )

        with pytest.raises(RowDecodeError) as excinfo:
            run_reporting_pipeline(RunConfig(input_path=bad, output_dir=out_dir))
        assert excinfo.value.position == 3
        assert (out_dir / "top10_ctr.csv").read_text(encoding="utf-8") == before

    def test_missing_header(self, write_csv, tmp_path):
        bad = write_csv("campaign_id,impressions,clicks,conversions\ncamp1,1,1,1\n")
        out_dir = tmp_path / "out"
        with pytest.raises(MissingColumnsError):
            run_reporting_pipeline(RunConfig(input_path=bad, output_dir=out_dir))
        assert not out_dir.exists()

    def test_missing_input_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            run_reporting_pipeline(RunConfig(input_path=tmp_path / "nope.csv", output_dir=tmp_path / "out"))


class TestOptionalOutputs:
    def test_excel_workbook(self, write_csv, tmp_path):
        path = write_csv(HEADER + "a,100,10,50.00,10\nb,100,20,80.00,0\n")
        excel_path = tmp_path / "reports" / "summary.xlsx"
        run_reporting_pipeline(RunConfig(input_path=path, output_dir=tmp_path / "out", excel_path=excel_path))

        workbook = load_workbook(excel_path)
        assert workbook.sheetnames == ["top_ctr", "top_cpa"]
        ctr_rows = list(workbook["top_ctr"].iter_rows(values_only=True))
        assert ctr_rows[0][0] == "campaign_id"
        assert ctr_rows[1][0] == "b"
        assert ctr_rows[1][6] is None
        cpa_rows = list(workbook["top_cpa"].iter_rows(values_only=True))
        assert len(cpa_rows) == 2
        assert cpa_rows[1][6] == 5.0
        workbook.close()

    def test_summary_json(self, sample_csv, tmp_path):
        summary_path = tmp_path / "summary.json"
        config = RunConfig(
            input_path=sample_csv,
            output_dir=tmp_path / "out",
            benchmark=True,
            summary_json_path=summary_path,
        )
        run_reporting_pipeline(config)

        summary = json.loads(summary_path.read_text(encoding="utf-8"))
        assert summary["campaigns"] == 2
        assert summary["rows_read"] == 2
        assert summary["top_ctr_campaigns"] == ["camp1", "camp2"]
        assert "aggregate" in summary["stage_timings"]
        assert "stage_reports" in summary["stage_timings"]
        assert "commit_reports" not in summary["stage_timings"]
        assert summary["elapsed_before_commit"] >= sum(summary["stage_timings"].values()) - 1e-5

    def test_skip_policy_reports_skipped_rows(self, write_csv, tmp_path, capsys):
        path = write_csv(HEADER + "a,100,10,50.00,10\nb,oops,1,1.00,1\n")
        result = run_reporting_pipeline(
            RunConfig(input_path=path, output_dir=tmp_path / "out", on_bad_row="skip")
        )
        assert result.stats.rows_skipped == 1
        assert result.campaigns == 1
        assert "line 3:" in capsys.readouterr().err

    def test_unreadable_row_is_skipped_and_later_rows_kept(self, write_csv, tmp_path, capsys):
        path = write_csv(HEADER + "a,100,10,50.00,10\n" + "x" * 200000 + ",1,1,1.00,1\n" + "b,100,5,5.00,1\n")
        result = run_reporting_pipeline(
            RunConfig(input_path=path, output_dir=tmp_path / "out", on_bad_row="skip")
        )
        assert result.campaigns == 2
        assert result.stats.rows_read == 3
        assert result.stats.rows_skipped == 1
        assert result.stats.rows_aggregated == 2
        assert "line 3: unreadable record" in capsys.readouterr().err

    def test_benchmark_prints_stage_timing(self, sample_csv, tmp_path, capsys):
        run_reporting_pipeline(RunConfig(input_path=sample_csv, output_dir=tmp_path / "out", benchmark=True))
        captured = capsys.readouterr()
        assert "Stage Timing:" in captured.err
        assert "benchmark: parsed 2 data rows" in captured.err
        assert "Summary prepared: campaigns=2" in captured.out

    def test_quiet_without_benchmark(self, sample_csv, tmp_path, capsys):
        run_reporting_pipeline(RunConfig(input_path=sample_csv, output_dir=tmp_path / "out"))
        assert "Stage Timing:" not in capsys.readouterr().err


class TestStagedOutputs:
    def test_nothing_replaced_until_commit(self, tmp_path):
        target = tmp_path / "report.csv"
        target.write_text("old", encoding="utf-8")
        staged = StagedOutputs()
        staged.stage(target, lambda path: path.write_text("new", encoding="utf-8"))
        assert target.read_text(encoding="utf-8") == "old"

        assert staged.commit() == [target]
        assert target.read_text(encoding="utf-8") == "new"
        assert list(tmp_path.iterdir()) == [target]

    def test_writer_failure_is_wrapped_and_cleaned(self, tmp_path):
        def _fail(path):
            path.write_text("partial", encoding="utf-8")
            raise PermissionError("denied")

        staged = StagedOutputs()
        with pytest.raises(ReportWriteError, match="report.csv"):
            staged.stage(tmp_path / "report.csv", _fail)
        assert list(tmp_path.iterdir()) == []

    def test_discard_removes_temp_files(self, tmp_path):
        staged = StagedOutputs()
        staged.stage(tmp_path / "a.csv", lambda path: path.write_text("a", encoding="utf-8"))
        staged.discard()
        assert list(tmp_path.iterdir()) == []
