"""
MultiQC custom content file generators for HsMetrics records.

MultiQC supports custom content via specially formatted files with embedded
YAML configuration in comments. This module generates TSV files that MultiQC
will automatically detect and include in reports.

Reference: https://multiqc.info/docs/development/modules/#custom-content

File format:
    # id: 'hsmetrics_general_stats'
    # plot_type: 'generalstats'
    # headers:
    #     pct_selected_bases:
    #         title: '% Selected'
    Sample	pct_selected_bases	...
    NA12878	78.1	...
"""

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import yaml

from .schema import COVERAGE_THRESHOLDS, HsMetrics


def _write_tsv_with_header(
    output_path: Path,
    yaml_config: dict[str, Any],
    headers: list[str],
    rows: list[list[Any]],
) -> None:
    """
    Write a TSV file with embedded YAML header for MultiQC.

    Args:
        output_path: Path to write the TSV file
        yaml_config: YAML configuration dict to embed in comments
        headers: Column headers
        rows: Data rows (list of lists); None is written as an empty cell
    """
    lines = []

    yaml_str = yaml.dump(yaml_config, default_flow_style=False, sort_keys=False)
    for yaml_line in yaml_str.splitlines():
        lines.append(f"# {yaml_line}")

    lines.append("\t".join(headers))

    for row in rows:
        lines.append("\t".join("" if v is None else str(v) for v in row))

    output_path.write_text("\n".join(lines) + "\n")


def generate_general_stats_tsv(
    records: Iterable[HsMetrics],
    output_path: Path,
) -> Path:
    """
    Generate a TSV file for the MultiQC General Statistics table.

    Adds the headline capture metrics to the table at the top of every
    MultiQC report, one row per record keyed by its grouping label.

    Args:
        records: HsMetrics records to report
        output_path: Path to write the TSV file

    Returns:
        Path to the written file
    """
    yaml_config = {
        "id": "hsmetrics_general_stats",
        "plot_type": "generalstats",
        "pconfig": {
            "namespace": "HsMetrics",
        },
        "headers": {
            "pct_selected_bases": {
                "title": "% Selected",
                "description": "Aligned bases on or near a bait",
                "format": "{:,.1f}",
                "suffix": "%",
                "scale": "RdYlGn",
                "min": 0,
                "max": 100,
            },
            "mean_target_coverage": {
                "title": "Target Cov",
                "description": "Mean coverage of target regions",
                "format": "{:,.1f}",
                "scale": "Blues",
            },
            "fold_80_base_penalty": {
                "title": "Fold80",
                "description": "Fold 80 base penalty",
                "format": "{:,.2f}",
                "scale": "OrRd",
                "cond_formatting_rules": {
                    "pass": [{"lt": 2}],
                    "warn": [{"lt": 3}],
                    "fail": [{"gt": 3}],
                },
            },
            "target_bases_30x_pct": {
                "title": "≥30X %",
                "description": "Percentage of target bases with ≥30X coverage",
                "format": "{:,.1f}",
                "suffix": "%",
                "scale": "RdYlGn",
                "min": 0,
                "max": 100,
            },
            "hs_library_size": {
                "title": "Library Size",
                "description": "Estimated unique molecules in the selected library",
                "format": "{:,.0f}",
                "scale": "Purples",
            },
        },
    }

    headers = [
        "Sample",
        "pct_selected_bases",
        "mean_target_coverage",
        "fold_80_base_penalty",
        "target_bases_30x_pct",
        "hs_library_size",
    ]
    rows = [
        [
            record.label,
            record.pct_selected_bases * 100,
            record.mean_target_coverage,
            record.fold_80_base_penalty,
            record.pct_target_bases_30x * 100,
            record.hs_library_size,
        ]
        for record in records
    ]

    _write_tsv_with_header(output_path, yaml_config, headers, rows)
    return output_path


def generate_target_coverage_tsv(
    records: Iterable[HsMetrics],
    output_path: Path,
    thresholds: Sequence[int] = COVERAGE_THRESHOLDS,
) -> Path:
    """
    Generate a TSV file for a table of target coverage at each threshold.

    Args:
        records: HsMetrics records to report
        output_path: Path to write the TSV file
        thresholds: Coverage depths to include, each one of COVERAGE_THRESHOLDS

    Returns:
        Path to the written file
    """
    yaml_config = {
        "id": "hsmetrics_target_coverage",
        "section_name": "Target Coverage",
        "description": "Percentage of target bases reaching each coverage depth",
        "plot_type": "table",
        "pconfig": {
            "namespace": "HsMetrics",
            "id": "hsmetrics_target_coverage_table",
            "title": "HsMetrics: Target Coverage",
        },
        "headers": {
            f"{depth}x": {
                "title": f"≥{depth}X %",
                "format": "{:,.1f}",
                "suffix": "%",
                "scale": "RdYlGn",
                "min": 0,
                "max": 100,
            }
            for depth in thresholds
        },
    }

    headers = ["Sample", *(f"{depth}x" for depth in thresholds)]
    rows = [
        [record.label, *(record.coverage_fraction(depth) * 100 for depth in thresholds)]
        for record in records
    ]

    _write_tsv_with_header(output_path, yaml_config, headers, rows)
    return output_path
