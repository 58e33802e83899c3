"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from datapack.cli import _build_parser, main
from datapack.logging import reset_logging


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "build"])
    assert args.verbose is True
    assert args.command == "build"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["build", "--verbose"])
    assert args.verbose is True
    assert args.command == "build"


def test_cli_build_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(["build", "pack", "-o", "out.zip", "--compression", "lzma", "--dry-run"])
    assert args.path == "pack"
    assert args.output == "out.zip"
    assert args.compression == "lzma"
    assert args.dry_run is True


def test_cli_rejects_unknown_compression() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["build", "--compression", "zstd"])


def test_cli_init_accepts_namespace() -> None:
    parser = _build_parser()
    args = parser.parse_args(["init", "--namespace", "demo"])
    assert args.command == "init"
    assert args.namespace == "demo"


def test_main_dry_run_prints_entries(project_builder, capsys) -> None:
    project_builder.manifest(
        """
        namespaces:
          - name: test
            components:
              - category: function
                path: hello
                content: "say hi"
                on_load: true
        """
    )

    main(["build", str(project_builder.path()), "--dry-run"])

    output = capsys.readouterr().out
    assert "data/test/functions/hello.mcfunction" in output
    assert "data/minecraft/tags/functions/load.json" in output


def test_main_build_failure_exits_nonzero(project_builder, capsys) -> None:
    project_builder.manifest(
        """
        namespaces:
          - name: test
            components:
              - category: function
                path: hello
                content: "say one"
              - category: function
                path: hello
                content: "say two"
        """
    )

    with pytest.raises(SystemExit) as excinfo:
        main(["build", str(project_builder.path())])

    assert excinfo.value.code == 1
    assert "data/test/functions/hello.mcfunction" in capsys.readouterr().err


def test_main_init_writes_manifest(tmp_path: Path, capsys) -> None:
    main(["init", str(tmp_path), "--namespace", "demo"])

    assert (tmp_path / ".datapack.yml").exists()
    assert "Manifest created" in capsys.readouterr().out


_BROKEN_STRUCTURE_MANIFEST = """
namespaces:
  - name: test
    components:
      - category: structure
        path: broken
        content: "{unterminated"
"""


def test_main_verbose_logs_failure_cause(project_builder, capsys) -> None:
    project_builder.manifest(_BROKEN_STRUCTURE_MANIFEST)

    with pytest.raises(SystemExit):
        main(["--verbose", "build", str(project_builder.path())])

    err = capsys.readouterr().err
    assert "Build aborted at data/test/structures/broken.nbt" in err
    assert "EncodingError" in err


def test_main_quiet_failure_omits_cause_trace(project_builder, capsys) -> None:
    project_builder.manifest(_BROKEN_STRUCTURE_MANIFEST)

    with pytest.raises(SystemExit):
        main(["build", str(project_builder.path())])

    assert "EncodingError" not in capsys.readouterr().err


def test_main_writes_log_file(project_builder, tmp_path: Path) -> None:
    project_builder.manifest("pack:\n  format: 10\n")
    log_file = tmp_path / "datapack.log"

    main(["--log-file", str(log_file), "build", str(project_builder.path()), "--dry-run"])
    reset_logging()

    assert "Dry run" in log_file.read_text(encoding="utf-8")


def test_cli_accepts_log_file_option() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--log-file", "build.log", "init"])
    assert args.log_file == Path("build.log")
