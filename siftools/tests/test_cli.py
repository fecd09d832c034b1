import pandas as pd
import pytest

from siftools.cli import build_parser, main
from siftools.formats import idf, ipf


@pytest.fixture(scope="function")
def sample_files(tmp_path, simple_grid, observations):
    ipf_path = tmp_path / "input" / "heads.ipf"
    ipf.write(ipf_path, observations)
    grid_path = tmp_path / "head_l1.idf"
    idf.write(grid_path, simple_grid)
    return ipf_path, grid_path


def test_parser_defaults():
    args = build_parser().parse_args(["sample", "a.ipf", "b.idf", "c.ipf"])
    assert args.decimal_count == 2
    assert args.pvalues == [10.0, 50.0, 90.0]
    assert args.filter == "*.ipf"
    assert not args.interpolate
    assert args.log_level == "INFO"

    args = build_parser().parse_args(
        ["join", "a.ipf", "b.ipf", "c.ipf", "--key1", "id", "--key2", "3"]
    )
    assert args.join == "full"
    assert args.max_distance is None


def test_main_sample(tmp_path, sample_files, capsys):
    ipf_path, grid_path = sample_files
    output_path = tmp_path / "sampled.ipf"
    status = main(
        [
            "sample",
            str(ipf_path),
            str(grid_path),
            str(output_path),
            "-s",
            "4",
            "-i",
            "--logger",
            "null",
        ]
    )
    assert status == 0
    dataset = ipf.read(output_path)
    assert dataset.columns[-3:] == ("head_l1", "RES", "ABSRES")
    assert (tmp_path / "sampled_stats.csv").exists()
    # The invalid observation is summarized
    assert "warning(s)" in capsys.readouterr().err


def test_main_sample_existing_output(tmp_path, sample_files):
    ipf_path, grid_path = sample_files
    output_path = tmp_path / "sampled.ipf"
    args = [
        "sample",
        str(ipf_path),
        str(grid_path),
        str(output_path),
        "--logger",
        "null",
    ]
    assert main(args) == 0
    assert main(args) == 1
    assert main(args + ["-o"]) == 0


def test_main_sample_missing_input(tmp_path, sample_files, capsys):
    _, grid_path = sample_files
    status = main(
        [
            "sample",
            str(tmp_path / "missing.ipf"),
            str(grid_path),
            str(tmp_path / "out.ipf"),
            "--logger",
            "null",
        ]
    )
    assert status == 1
    assert "doesn't exist" in capsys.readouterr().err


def test_main_sample_invalid_option(tmp_path, sample_files):
    ipf_path, grid_path = sample_files
    args = [
        "sample",
        str(ipf_path),
        str(grid_path),
        str(tmp_path / "out.ipf"),
        "--logger",
        "null",
    ]
    assert main(args + ["-d", "-1"]) == 1
    assert main(args + ["--log-level", "verbose"]) == 1
    assert not (tmp_path / "out.ipf").exists()


def test_main_sample_directory(tmp_path, sample_files):
    ipf_path, grid_path = sample_files
    output_dir = tmp_path / "output"
    status = main(
        [
            "sample",
            str(ipf_path.parent),
            str(grid_path),
            str(output_dir),
            "-s",
            "head",
            "--csv",
            "--logger",
            "null",
        ]
    )
    assert status == 0
    df = pd.read_csv(output_dir / "heads.csv", dtype=str)
    assert list(df["head_l1"]) == ["9.00", "2.00", "-9999.00", "8.00"]

    # A file that cannot be read fails the run, the others are processed
    (ipf_path.parent / "broken.ipf").write_text("not an ipf\n")
    status = main(
        [
            "sample",
            str(ipf_path.parent),
            str(grid_path),
            str(output_dir),
            "-o",
            "--logger",
            "null",
        ]
    )
    assert status == 1
    assert (output_dir / "heads.ipf").exists()


def test_main_join(tmp_path, timeseries_dataset):
    path1 = tmp_path / "one" / "wells.ipf"
    path2 = tmp_path / "two" / "wells.ipf"
    ipf.write(path1, timeseries_dataset)
    ipf.write(path2, timeseries_dataset)
    output_path = tmp_path / "joined" / "wells.ipf"

    status = main(
        [
            "join",
            str(path1),
            str(path2),
            str(output_path),
            "--key1",
            "id",
            "--key2",
            "3",
            "--join",
            "inner",
            "--logger",
            "null",
        ]
    )
    assert status == 0
    joined = ipf.read(output_path)
    assert joined.columns == timeseries_dataset.columns
    ts = joined.points[0].timeseries
    assert ts.column_names == ("head", "head2")
    assert list(ts.columns[1].values) == [1.0, 2.0]


def test_main_join_invalid_period(tmp_path, timeseries_dataset):
    path = tmp_path / "wells.ipf"
    ipf.write(path, timeseries_dataset)
    status = main(
        [
            "join",
            str(path),
            str(path),
            str(tmp_path / "joined.ipf"),
            "--key1",
            "id",
            "--key2",
            "id",
            "--start",
            "20200201",
            "--end",
            "20200101",
            "--logger",
            "null",
        ]
    )
    assert status == 1
    assert not (tmp_path / "joined.ipf").exists()
