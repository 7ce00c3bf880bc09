import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from summerge import ConfigurationError  # noqa: E402
from summerge.bridge import Bridge  # noqa: E402

CONFIGURATION = {
    "tag": "study1",
    "chromosomeColumn": "chrom",
    "positionColumn": "pos",
    "referenceColumn": "ref",
    "alternativeColumn": "alt",
    "pValueColumn": "pval",
    "betaColumn": "beta",
    "sebetaColumn": "sebeta",
    "afColumn": "af",
    "pval_threshold": 0.01,
    "delimiter": "\t",
}
HEADER = b"chrom\tpos\tref\talt\tpval\tbeta\tsebeta\taf\n"
ROWS = b"1\t12345\tA\tT\t0.001\t0.5\t0.1\t0.3\n2\t67890\tG\tC\t0.5\t0.2\t0.05\t0.4\n"


def test_bridge_runs_filter_partition_merge_round_trip() -> None:
    bridge = Bridge()

    metadata_json = bridge.create_file_columns_index(HEADER, json.dumps(CONFIGURATION))
    metadata = json.loads(metadata_json)
    assert metadata["chromosomeColumn"] == 0
    assert metadata["afColumn"] == 7
    assert metadata["tag"] == "study1"

    variants = bridge.buffer_variants(ROWS, metadata_json)
    assert variants == ["1\t12345\tA\tT"]

    blobs = bridge.buffer_summary_passes(ROWS, metadata_json, [variants])
    assert bridge.header_bytes_string(blobs, "\t") == "\t".join(bridge.create_header("study1"))
    assert bridge.summary_bytes_string(blobs, "\t") == [
        "1.000000e-03\t0.500000\t0.100000\t0.300000"
    ]


def test_bridge_create_header() -> None:
    assert Bridge.create_header("t") == ["t_pval", "t_beta", "t_sebeta", "t_af"]


@pytest.mark.parametrize(
    "metadata_json",
    [
        "not json",
        json.dumps({"tag": "study1"}),
        json.dumps({**CONFIGURATION, "chromosomeColumn": -1}),
        json.dumps({**CONFIGURATION, "chromosomeColumn": "chrom"}),
    ],
)
def test_bridge_rejects_invalid_metadata(metadata_json: str) -> None:
    with pytest.raises(ConfigurationError):
        Bridge().buffer_variants(ROWS, metadata_json)


def test_bridge_reports_unknown_header_column() -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        Bridge().create_file_columns_index(b"chrom\tpos\n", json.dumps(CONFIGURATION))


def test_bridge_merge_can_prefix_cpra_columns() -> None:
    bridge = Bridge()
    metadata_json = bridge.create_file_columns_index(HEADER, json.dumps(CONFIGURATION))
    blobs = bridge.buffer_summary_passes(ROWS, metadata_json, [["1\t12345\tA\tT"]])

    header = bridge.header_bytes_string(blobs, ",", include_cpra=True)
    rows = bridge.summary_bytes_string(blobs, ",", include_cpra=True, key_delimiter="\t")

    assert header == "chromosome,position,ref,alt,study1_pval,study1_beta,study1_sebeta,study1_af"
    assert rows == ["1,12345,A,T,1.000000e-03,0.500000,0.100000,0.300000"]
