from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from file_bundler import cli
from file_bundler.exceptions import InvalidMatcherError, InvalidTargetError


@pytest.fixture(autouse=True)
def _clean_environment(mocker: MockerFixture) -> None:
    mocker.patch.object(cli, "load_environment", return_value={})


@pytest.mark.integration
def test_main_passes_settings_to_bundle_directory(tmp_path: Path, mocker: MockerFixture) -> None:
    mapping_file = tmp_path / "mapping.yaml"
    mapping_file.write_text("usage.txt: usage\n", encoding="utf-8")
    bundle_directory = mocker.patch.object(cli, "bundle_directory", return_value={"FILE/usage": "aGk="})
    output = tmp_path / "bundle.go"

    exit_code = cli.main(
        [
            "--package",
            "assets",
            "--directory",
            str(tmp_path),
            "--output",
            str(output),
            "--prefix",
            "FILE",
            "--gzip",
            "--mapping-file",
            str(mapping_file),
        ],
    )

    assert exit_code == 0
    bundle_directory.assert_called_once_with(
        tmp_path,
        matcher=".*",
        prefix="FILE",
        plain_text=False,
        compress=True,
        http_paths=False,
        mapping={"usage.txt": "usage"},
    )
    assert '\t"FILE/usage": "aGk=",\n' in output.read_text(encoding="utf-8")


@pytest.mark.integration
def test_main_suppress_errors_writes_empty_bundle(tmp_path: Path, mocker: MockerFixture) -> None:
    mocker.patch.object(cli, "bundle_directory", side_effect=PermissionError("denied"))
    output = tmp_path / "bundle.go"

    exit_code = cli.main(["-p", "assets", "-o", str(output), "--suppress-errors"])

    assert exit_code == 0
    assert output.read_text(encoding="utf-8").endswith("var bundle = map[string]string{}\n")


@pytest.mark.integration
def test_main_propagates_errors_without_suppression(tmp_path: Path, mocker: MockerFixture) -> None:
    mocker.patch.object(
        cli,
        "bundle_directory",
        side_effect=InvalidMatcherError(pattern="[", reason="unterminated character set"),
    )
    output = tmp_path / "bundle.go"

    with pytest.raises(InvalidMatcherError):
        cli.main(["-p", "assets", "-o", str(output), "-m", "["])

    assert not output.exists()


@pytest.mark.integration
@pytest.mark.parametrize(("flag", "value"), [("-p", "func"), ("-n", "my-map")])
def test_main_rejects_invalid_target_before_walking(
    tmp_path: Path,
    mocker: MockerFixture,
    flag: str,
    value: str,
) -> None:
    bundle_directory = mocker.spy(cli, "bundle_directory")
    output = tmp_path / "bundle.go"
    args = ["-p", "assets", "-d", str(tmp_path / "missing"), "-o", str(output), "--suppress-errors", flag, value]

    with pytest.raises(InvalidTargetError) as exc_info:
        cli.main(args)

    assert exc_info.value.value == value
    bundle_directory.assert_not_called()
    assert not output.exists()
