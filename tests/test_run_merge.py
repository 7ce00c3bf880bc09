import importlib.util
import json
import sys
from pathlib import Path


def _load_run_merge_module():
    repo_root = Path(__file__).resolve().parents[1]
    module_path = repo_root / "scripts" / "run_merge.py"
    spec = importlib.util.spec_from_file_location("run_merge_script", module_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


def _write_inputs(tmp_path: Path) -> tuple[Path, list[str]]:
    configs_dir = tmp_path / "configs"
    configs_dir.mkdir()
    for tag, column in (("study1", "pval"), ("study2", "p")):
        (configs_dir / f"{tag}.json").write_text(
            json.dumps(
                {
                    "tag": tag,
                    "chromosomeColumn": "chrom",
                    "positionColumn": "pos",
                    "referenceColumn": "ref",
                    "alternativeColumn": "alt",
                    "pValueColumn": column,
                    "betaColumn": "beta",
                    "sebetaColumn": "sebeta",
                    "afColumn": "af",
                    "pval_threshold": 0.01,
                    "delimiter": "tab",
                }
            )
        )

    study1 = tmp_path / "study1.tsv"
    study1.write_text(
        "chrom\tpos\tref\talt\tpval\tbeta\tsebeta\taf\n"
        "1\t12345\tA\tT\t0.001\t0.5\t0.1\t0.3\n"
    )
    study2 = tmp_path / "study2.tsv"
    study2.write_text(
        "af\tsebeta\tbeta\tp\talt\tref\tpos\tchrom\n"
        "0.45\t0.02\t-0.1\t0.005\tC\tG\t67890\t2\n"
    )
    return configs_dir, [
        "--configs-dir",
        str(configs_dir),
        "--config",
        "study1",
        "--input",
        str(study1),
        "--config",
        "study2",
        "--input",
        str(study2),
    ]


def test_run_merge_writes_merged_table(tmp_path: Path, capsys) -> None:
    module = _load_run_merge_module()
    _, args = _write_inputs(tmp_path)
    output = tmp_path / "merged.tsv"

    exit_code = module.main([*args, "--output-tsv", str(output), "--include-cpra"])

    assert exit_code == 0
    lines = output.read_text().splitlines()
    assert lines[0] == (
        "chromosome\tposition\tref\talt\t"
        "study1_pval\tstudy1_beta\tstudy1_sebeta\tstudy1_af\t"
        "study2_pval\tstudy2_beta\tstudy2_sebeta\tstudy2_af"
    )
    assert sorted(lines[1:]) == sorted(
        [
            "1\t12345\tA\tT\t1.000000e-03\t0.500000\t0.100000\t0.300000\tNA\tNA\tNA\tNA",
            "2\t67890\tG\tC\tNA\tNA\tNA\tNA\t5.000000e-03\t-0.100000\t0.020000\t0.450000",
        ]
    )

    summary = json.loads(capsys.readouterr().out)
    assert summary["tags"] == ["study1", "study2"]
    assert summary["rows"] == 2


def test_run_merge_persists_storage(tmp_path: Path, capsys) -> None:
    module = _load_run_merge_module()
    _, args = _write_inputs(tmp_path)

    exit_code = module.main(
        [
            *args,
            "--output-tsv",
            str(tmp_path / "merged.tsv"),
            "--db-path",
            str(tmp_path / "merged.duckdb"),
            "--parquet-path",
            str(tmp_path / "merged.parquet"),
        ]
    )

    assert exit_code == 0
    assert (tmp_path / "merged.duckdb").exists()
    assert (tmp_path / "merged.parquet").exists()
    assert json.loads(capsys.readouterr().out)["variants"] == 2
