"""Tests for the synthetic dataset builder and the exposure report script."""

import sys
from pathlib import Path

import pytest
from openpyxl import load_workbook

import scripts.build_synthetic_dataset as build
from popexposure.data.dataset_loader import load_dataset_from_json, load_reference_from_json
from popexposure.models.demographics import Decile
from scripts.run_exposure import main


@pytest.fixture()
def synthetic_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(build, "DATA_DIR", tmp_path)
    build.main()
    return tmp_path


class TestBuildSyntheticDataset:
    """The builder writes loadable, consistent files."""

    def test_files_load(self, synthetic_dir: Path) -> None:
        reference = load_reference_from_json(synthetic_dir / "reference_v1.json")
        dataset = load_dataset_from_json(synthetic_dir / "dataset_v1.json")

        assert reference.n_industries == len(build.INDUSTRY_CODES)
        assert reference.n_sectors == len(build.SCC_CODES)
        for decile in Decile:
            assert len(dataset.consumption[(build.YEAR, decile)]) == reference.n_industries
            assert dataset.population_counts[(build.YEAR, decile)] > 0

    def test_seeded(self, synthetic_dir: Path) -> None:
        first = (synthetic_dir / "dataset_v1.json").read_text(encoding="utf-8")
        build.main()
        assert (synthetic_dir / "dataset_v1.json").read_text(encoding="utf-8") == first


class TestRunExposure:
    """End-to-end CLI run over the synthetic dataset."""

    def test_report_and_excel(
        self,
        synthetic_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        excel = synthetic_dir / "report.xlsx"
        monkeypatch.setattr(sys, "argv", [
            "run_exposure",
            "--reference", str(synthetic_dir / "reference_v1.json"),
            "--dataset", str(synthetic_dir / "dataset_v1.json"),
            "--year", "2015",
            "--excel", str(excel),
        ])
        main()

        out = capsys.readouterr().out
        assert "decile_10" in out
        assert "TotalPop" in out
        assert load_workbook(excel).sheetnames[0] == "Demand Emissions"

    def test_missing_year_exits_nonzero(
        self,
        synthetic_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(sys, "argv", [
            "run_exposure",
            "--reference", str(synthetic_dir / "reference_v1.json"),
            "--dataset", str(synthetic_dir / "dataset_v1.json"),
            "--year", "2010",
        ])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1

    def test_enum_options_any_case(
        self,
        synthetic_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr(sys, "argv", [
            "run_exposure",
            "--reference", str(synthetic_dir / "reference_v1.json"),
            "--dataset", str(synthetic_dir / "dataset_v1.json"),
            "--dimension", "decile",
            "--location", "domestic",
            "--pollutant", "total_pm25",
        ])
        main()

        out = capsys.readouterr().out
        assert "decile_1 " in out
        assert "DOMESTIC" in out
