"""Tests for the MultiQC custom content generators."""

from pathlib import Path
from typing import Any

import pytest
import yaml

from hsmetrics.multiqc import generate_general_stats_tsv, generate_target_coverage_tsv
from hsmetrics.schema import COVERAGE_THRESHOLDS, GroupingKey, HsMetrics


def parse_multiqc_tsv_header(content: str) -> dict[str, Any]:
    """
    Parse the YAML header from a MultiQC custom content TSV file.

    Raises:
        yaml.YAMLError: If the header contains invalid YAML
    """
    header_lines = []
    for line in content.strip().split("\n"):
        if line.startswith("#"):
            header_lines.append(line[2:] if line.startswith("# ") else line[1:])
        else:
            break
    return yaml.safe_load("\n".join(header_lines))


def parse_multiqc_tsv_data(content: str) -> list[list[str]]:
    """Return the non-comment rows of a MultiQC TSV file, header row first."""
    return [
        line.split("\t")
        for line in content.rstrip("\n").split("\n")
        if not line.startswith("#")
    ]


@pytest.fixture
def two_samples(complete_record: HsMetrics) -> list[HsMetrics]:
    """Two sample-level records, the second without a library size estimate."""
    second = complete_record.model_copy(
        update={
            "grouping": GroupingKey(sample="NA12891"),
            "hs_library_size": None,
            "pct_selected_bases": 0.5,
        }
    )
    return [complete_record, second]


class TestGeneralStats:
    """Test the General Statistics custom content."""

    def test_yaml_header(self, two_samples: list[HsMetrics], tmp_path: Path) -> None:
        path = generate_general_stats_tsv(two_samples, tmp_path / "gs_mqc.tsv")
        config = parse_multiqc_tsv_header(path.read_text())
        assert config["id"] == "hsmetrics_general_stats"
        assert config["plot_type"] == "generalstats"
        assert "pct_selected_bases" in config["headers"]

    def test_rows(self, two_samples: list[HsMetrics], tmp_path: Path) -> None:
        path = generate_general_stats_tsv(two_samples, tmp_path / "gs_mqc.tsv")
        header, first, second = parse_multiqc_tsv_data(path.read_text())
        assert header[0] == "Sample"
        assert first[0] == "NA12878"
        assert float(first[header.index("pct_selected_bases")]) == pytest.approx(60.0)
        assert second[header.index("hs_library_size")] == ""
        assert first[header.index("hs_library_size")] == "12345678"

    def test_headers_match_columns(
        self, two_samples: list[HsMetrics], tmp_path: Path
    ) -> None:
        path = generate_general_stats_tsv(two_samples, tmp_path / "gs_mqc.tsv")
        content = path.read_text()
        config = parse_multiqc_tsv_header(content)
        header = parse_multiqc_tsv_data(content)[0]
        assert list(config["headers"]) == header[1:]

    def test_no_records(self, tmp_path: Path) -> None:
        path = generate_general_stats_tsv([], tmp_path / "gs_mqc.tsv")
        assert parse_multiqc_tsv_data(path.read_text()) == [
            [
                "Sample",
                "pct_selected_bases",
                "mean_target_coverage",
                "fold_80_base_penalty",
                "target_bases_30x_pct",
                "hs_library_size",
            ]
        ]


class TestTargetCoverage:
    """Test the target coverage table."""

    def test_all_thresholds(self, two_samples: list[HsMetrics], tmp_path: Path) -> None:
        path = generate_target_coverage_tsv(two_samples, tmp_path / "cov_mqc.tsv")
        header, first, _ = parse_multiqc_tsv_data(path.read_text())
        assert header[1:] == [f"{depth}x" for depth in COVERAGE_THRESHOLDS]
        assert float(first[1]) == pytest.approx(99.0)

    def test_subset_of_thresholds(
        self, two_samples: list[HsMetrics], tmp_path: Path
    ) -> None:
        path = generate_target_coverage_tsv(
            two_samples, tmp_path / "cov_mqc.tsv", thresholds=[10, 30]
        )
        content = path.read_text()
        config = parse_multiqc_tsv_header(content)
        assert config["plot_type"] == "table"
        assert list(config["headers"]) == ["10x", "30x"]
        header = parse_multiqc_tsv_data(content)[0]
        assert header == ["Sample", "10x", "30x"]

    def test_unknown_threshold_raises(
        self, two_samples: list[HsMetrics], tmp_path: Path
    ) -> None:
        with pytest.raises(KeyError):
            generate_target_coverage_tsv(
                two_samples, tmp_path / "cov_mqc.tsv", thresholds=[3]
            )
