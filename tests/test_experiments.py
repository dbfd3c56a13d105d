import csv

import matplotlib

matplotlib.use("Agg")

import pytest

import experiments as exp


def test_generators_are_seeded():
    assert exp.generate_dataset("zipf64", 512, seed=4) == exp.generate_dataset("zipf64", 512, seed=4)
    assert len(exp.generate_dataset("english_like", 300, seed=1)) == 300
    assert set(exp.generate_dataset("constant", 64, seed=0)) == {ord("A")}


def test_unknown_generator():
    with pytest.raises(ValueError):
        exp.generate_dataset("nope", 10, seed=0)


@pytest.mark.parametrize("name", ["english_like", "repetitive90", "constant"])
def test_pipelines_agree(name):
    data = exp.generate_dataset(name, 2048, seed=9)
    walk = exp.run_one(data, "tree_walk")
    book = exp.run_one(data, "codebook")
    assert walk.correctness_ok == book.correctness_ok == 1
    assert walk.encoded_bits == book.encoded_bits
    assert walk.avg_code_length >= walk.entropy_bits - 1e-9
    if name != "constant":
        assert walk.avg_code_length < walk.entropy_bits + 1


def test_constant_data_encodes_to_nothing():
    row = exp.run_one(exp.gen_constant(100), "tree_walk")
    assert row.unique_symbols == 1
    assert row.encoded_bits == 0
    assert row.compressed_bytes == 0


def test_run_one_rejects_unknown_pipeline():
    with pytest.raises(ValueError):
        exp.run_one(b"abc", "obst")


def test_main_writes_outputs(tmp_path, capsys):
    rc = exp.main([
        "--outdir", str(tmp_path),
        "--runs", "2",
        "--exp1_size_kb", "1",
        "--exp1_generators", "zipf64,constant",
        "--exp2_min_kb", "1",
        "--exp2_max_kb", "2",
        "--exp2_generators", "uniform16",
    ])
    assert rc == 0

    with (tmp_path / "metrics.csv").open(newline="") as f:
        rows = list(csv.DictReader(f))
    # exp1: 2 generators x 2 runs x 2 pipelines, exp2: 2 sizes x 2 runs x 2 pipelines
    assert len(rows) == 16
    assert all(r["correctness_ok"] == "1" for r in rows)

    with (tmp_path / "summary.csv").open(newline="") as f:
        summary = list(csv.DictReader(f))
    assert len(summary) == 8
    assert all(r["n_runs"] == "2" for r in summary)

    assert (tmp_path / "exp1_code_length.png").exists()
    assert (tmp_path / "exp2_encode_time_uniform16.png").exists()
    assert (tmp_path / "exp2_decode_time_uniform16.png").exists()
    assert "Correctness rate across all runs: 1.000" in capsys.readouterr().out
