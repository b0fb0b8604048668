from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from flatten_source import __version__, cli
from flatten_source.config import ClassifiedSource, ExtractionResult, SourceKind
from flatten_source.logging import setup_logging
from flatten_source.settings import Settings

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.fixture(autouse=True)
def _no_env_overrides(mocker: MockerFixture) -> None:
    mocker.patch.object(cli, "env_defaults", return_value={})


@pytest.mark.unit
def test_parse_args_defaults() -> None:
    settings = cli.parse_args([])

    assert not settings.source
    assert settings.include == "*.c"
    assert settings.max_file_size == 22_000
    assert settings.languages == ["en"]


@pytest.mark.unit
def test_parse_args_parses_options() -> None:
    settings = cli.parse_args(
        [
            "https://github.com/org/demo",
            "--include",
            "*.c,*/src/*",
            "--exclude",
            "*.md",
            "--max-file-size",
            "0",
            "--cache-dir",
            "/tmp/clones",
            "--language",
            "de",
            "--language",
            "en",
        ],
    )

    assert settings.source == "https://github.com/org/demo"
    assert settings.include == "*.c,*/src/*"
    assert settings.exclude == "*.md"
    assert settings.max_file_size == 0
    assert settings.cache_dir == Path("/tmp/clones")
    assert settings.languages == ["de", "en"]


@pytest.mark.unit
def test_parse_args_uses_env_overrides(mocker: MockerFixture) -> None:
    mocker.patch.object(cli, "env_defaults", return_value={"include": "*.h", "cache_dir": "/var/cache/fs"})

    settings = cli.parse_args(["x"])

    assert settings.include == "*.h"
    assert settings.cache_dir == Path("/var/cache/fs")


@pytest.mark.unit
def test_parse_args_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.parse_args(["--version"])

    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out


@pytest.mark.unit
def test_dispatch_video_strips_noise_marker(mocker: MockerFixture) -> None:
    fetch = mocker.patch.object(
        cli,
        "fetch_transcript",
        return_value=ExtractionResult(kind=SourceKind.VIDEO, text="[Music] hello [Music]world "),
    )

    result = cli.dispatch(
        ClassifiedSource(kind=SourceKind.VIDEO, video_id="abc", url="https://youtu.be/abc"),
        Settings(),
    )

    assert result.text == " hello world "
    fetch.assert_called_once_with("abc", ["en"])


@pytest.mark.unit
def test_dispatch_repository_uses_settings(mocker: MockerFixture) -> None:
    collect = mocker.patch.object(
        cli,
        "collect_repository",
        return_value=ExtractionResult(kind=SourceKind.REPOSITORY, text="blocks"),
    )
    settings = Settings(include="*.h", exclude="*.md", max_file_size=5, cache_dir=Path("clones"))

    result = cli.dispatch(
        ClassifiedSource(kind=SourceKind.REPOSITORY, url="https://github.com/org/demo.git"),
        settings,
    )

    assert result.text == "blocks"
    kwargs = collect.call_args.kwargs
    assert collect.call_args.args == ("https://github.com/org/demo.git",)
    assert kwargs["include_patterns"] == "*.h"
    assert kwargs["exclude_patterns"] == "*.md"
    assert kwargs["max_file_size"] == 5
    assert kwargs["cache"].root == Path("clones")


@pytest.mark.unit
def test_dispatch_document_and_generic(mocker: MockerFixture) -> None:
    mocker.patch.object(cli, "extract_document", return_value="pdf text\n")
    mocker.patch.object(cli, "extract_generic", return_value="page text")

    doc = cli.dispatch(ClassifiedSource(kind=SourceKind.DOCUMENT, url="a.pdf"), Settings())
    gen = cli.dispatch(ClassifiedSource(kind=SourceKind.GENERIC, url="a.txt"), Settings())

    assert (doc.kind, doc.text) == (SourceKind.DOCUMENT, "pdf text\n")
    assert (gen.kind, gen.text) == (SourceKind.GENERIC, "page text")


@pytest.mark.unit
def test_main_prints_result_text(mocker: MockerFixture, capsys: pytest.CaptureFixture[str]) -> None:
    mocker.patch.object(cli, "extract_generic", return_value="hello")

    exit_code = cli.main(["notes.txt"])

    assert exit_code == 0
    assert capsys.readouterr().out == "hello\n"


@pytest.mark.unit
def test_main_prints_clone_failure_on_stdout(mocker: MockerFixture, capsys: pytest.CaptureFixture[str]) -> None:
    message = "Failure to clone repository at `https://github.com/org/demo.git`"
    mocker.patch.object(
        cli,
        "collect_repository",
        return_value=ExtractionResult(kind=SourceKind.REPOSITORY, text=message, failure=message),
    )

    exit_code = cli.main(["https://github.com/org/demo"])

    assert exit_code == 0
    assert capsys.readouterr().out == message + "\n"


@pytest.mark.unit
def test_main_reports_missing_video_id(mocker: MockerFixture, capsys: pytest.CaptureFixture[str]) -> None:
    fetch = mocker.patch.object(cli, "fetch_transcript")

    exit_code = cli.main(["https://www.youtube.com/channel/abc"])

    assert exit_code == 0
    fetch.assert_not_called()
    captured = capsys.readouterr()
    assert not captured.out
    assert "Could not get YouTube video ID from ``" in captured.err


@pytest.mark.unit
def test_main_propagates_document_errors(mocker: MockerFixture) -> None:
    mocker.patch.object(cli, "extract_document", side_effect=OSError("boom"))

    with pytest.raises(OSError, match="boom"):
        cli.main(["paper.pdf"])


@pytest.mark.unit
def test_main_verbose_logs_to_file(tmp_path: Path, mocker: MockerFixture) -> None:
    mocker.patch.object(cli, "extract_generic", return_value="")
    log_file = tmp_path / "ingest.log"

    try:
        cli.main(["notes.txt", "--verbose", "--log-file", str(log_file)])
    finally:
        setup_logging()

    content = log_file.read_text(encoding="utf-8")
    assert '"event": "source_classified"' in content
    assert '"kind": "generic"' in content


@pytest.mark.unit
def test_main_logs_recovered_failures_below_warning(mocker: MockerFixture) -> None:
    message = "Failure to clone repository at `https://github.com/org/demo.git`"
    mocker.patch.object(
        cli,
        "collect_repository",
        return_value=ExtractionResult(kind=SourceKind.REPOSITORY, text=message, failure=message),
    )
    log = mocker.patch.object(cli, "logger")

    cli.main(["https://github.com/org/demo"])

    log.warning.assert_not_called()
    log.info.assert_called_once_with("extraction_failed", kind="repository", failure=message)
