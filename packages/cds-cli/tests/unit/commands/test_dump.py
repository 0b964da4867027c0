"""Tests for the cds dump command.

No Java process is started: the runtime is built with a mocked
process factory.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from cds_cli.commands.dump import dump
from cds_core.runtime import CDSRuntime


@pytest.fixture
def process_factory() -> MagicMock:
    """Mocked subprocess.Popen whose process exits with status 0."""
    proc = MagicMock()
    proc.pid = 777
    proc.communicate.return_value = ("dumping\n", "")
    proc.wait.return_value = 0
    return MagicMock(return_value=proc)


@pytest.fixture
def mocked_runtime(process_factory: MagicMock) -> Generator[MagicMock, None, None]:
    """Route CDSRuntime construction through the mocked process factory."""

    def build(vm: Any, **kwargs: Any) -> CDSRuntime:
        return CDSRuntime(vm, process_factory=process_factory, **kwargs)

    with patch("cds_core.runtime.CDSRuntime", side_effect=build) as runtime_cls:
        yield runtime_cls


class TestDumpDryRun:
    """Tests for --dry-run."""

    @pytest.mark.requirement("CDS-CLI-002")
    def test_static_plan(self, isolated_runner: CliRunner) -> None:
        """The plan shows archive, class list and the filtered command."""
        result = isolated_runner.invoke(
            dump,
            [
                "--dry-run",
                "--java-home",
                "jdk",
                "-o",
                "app.jsa",
                "--vm-arg=-Xmx512m",
                "--vm-arg=-XX:+DumpSharedSpaces",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Archive: app.jsa" in result.output
        assert "Class list: app.jsa.classlist" in result.output
        expected = (
            f"{Path('jdk') / 'bin' / 'java'} -Xlog:cds -Xshare:dump "
            "-XX:SharedClassListFile=app.jsa.classlist -XX:SharedArchiveFile=app.jsa -Xmx512m"
        )
        assert expected in result.output
        assert "DumpSharedSpaces" not in result.output
        assert not Path("app.jsa.classlist").exists()

    def test_default_name_uses_pid(self, isolated_runner: CliRunner) -> None:
        """Without -o the archive is named after the process."""
        result = isolated_runner.invoke(dump, ["--dry-run", "--java-home", "jdk"])
        assert result.exit_code == 0
        assert "_static.jsa" in result.output
        assert "java_pid" in result.output

    @pytest.mark.requirement("CDS-DUMP-002")
    def test_empty_output_name_used_verbatim(self, isolated_runner: CliRunner) -> None:
        """An empty -o is not treated as a configuration error."""
        result = isolated_runner.invoke(dump, ["--dry-run", "--java-home", "jdk", "-o", ""])

        assert result.exit_code == 0, result.output
        assert "Class list: .classlist" in result.output
        assert "-XX:SharedArchiveFile=\n" in result.output
        assert "Invalid configuration" not in result.output

    def test_dynamic_plan(self, isolated_runner: CliRunner) -> None:
        """Dynamic plans start no process."""
        result = isolated_runner.invoke(dump, ["--dry-run", "--dynamic", "-o", "top.jsa"])
        assert result.exit_code == 0
        assert "Archive: top.jsa" in result.output
        assert "no process is started" in result.output

    def test_static_plan_needs_java_home(self, isolated_runner: CliRunner) -> None:
        """Without java_home the command cannot be built."""
        result = isolated_runner.invoke(dump, ["--dry-run"])
        assert result.exit_code == 1
        assert "java_home" in result.output

    def test_java_home_from_environment(
        self,
        isolated_runner: CliRunner,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """JAVA_HOME is used when --java-home is absent."""
        monkeypatch.setenv("JAVA_HOME", "envjdk")
        result = isolated_runner.invoke(dump, ["--dry-run", "-o", "a.jsa"])
        assert result.exit_code == 0
        assert str(Path("envjdk") / "bin" / "java") in result.output


class TestDumpConfigFile:
    """Tests for -c/--config."""

    def test_yaml_values_and_cli_override(
        self,
        isolated_runner: CliRunner,
        write_file: Callable[[str, str], Path],
    ) -> None:
        """CLI options win over the file."""
        write_file(
            "cds.yaml",
            "java_home: filejdk\npid: 31\nvm_arguments:\n  - -Xss2m\n",
        )

        result = isolated_runner.invoke(
            dump,
            ["--dry-run", "-c", "cds.yaml", "--java-home", "clijdk"],
        )

        assert result.exit_code == 0, result.output
        assert "java_pid31_static.jsa" in result.output
        assert str(Path("clijdk") / "bin" / "java") in result.output
        assert "-Xss2m" in result.output

    def test_missing_config(self, isolated_runner: CliRunner) -> None:
        """Missing config files are system errors."""
        result = isolated_runner.invoke(dump, ["--dry-run", "-c", "missing.yaml"])
        assert result.exit_code == 2
        assert "not found" in result.output.lower()

    def test_invalid_yaml(
        self,
        isolated_runner: CliRunner,
        write_file: Callable[[str, str], Path],
    ) -> None:
        """YAML syntax errors are user errors."""
        write_file("cds.yaml", "java_home: [unclosed\n")
        result = isolated_runner.invoke(dump, ["--dry-run", "-c", "cds.yaml"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output

    def test_schema_error(
        self,
        isolated_runner: CliRunner,
        write_file: Callable[[str, str], Path],
    ) -> None:
        """Schema violations name the offending field."""
        write_file("cds.yaml", "pid: -1\n")
        result = isolated_runner.invoke(dump, ["--dry-run", "-c", "cds.yaml"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "pid" in result.output

    def test_not_a_mapping(
        self,
        isolated_runner: CliRunner,
        write_file: Callable[[str, str], Path],
    ) -> None:
        """Top-level lists are rejected."""
        write_file("cds.yaml", "- a\n")
        result = isolated_runner.invoke(dump, ["--dry-run", "-c", "cds.yaml"])
        assert result.exit_code == 1
        assert "must be a mapping" in result.output


class TestDumpRun:
    """Tests for an actual static dump through LocalHost."""

    @pytest.mark.requirement("CDS-CLI-003")
    def test_static_dump(
        self,
        isolated_runner: CliRunner,
        classlist: Path,
        mocked_runtime: MagicMock,
        process_factory: MagicMock,
    ) -> None:
        """The class list is copied and the dump process is spawned."""
        result = isolated_runner.invoke(
            dump,
            [
                "--java-home",
                "jdk",
                "--class-list",
                str(classlist),
                "-o",
                "app.jsa",
                "--vm-arg=-Xmx512m",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Archive dump finished: app.jsa" in result.output
        assert Path("app.jsa.classlist").read_text() == classlist.read_text()

        (command,), kwargs = process_factory.call_args
        assert command[-1] == "-Xmx512m"
        assert kwargs["env"] == {"EnvP": "null"}

    def test_nonzero_exit_is_a_warning(
        self,
        isolated_runner: CliRunner,
        classlist: Path,
        mocked_runtime: MagicMock,
        process_factory: MagicMock,
    ) -> None:
        """A failing child is reported without failing the command."""
        process_factory.return_value.wait.return_value = 1

        result = isolated_runner.invoke(
            dump,
            ["--java-home", "jdk", "--class-list", str(classlist), "-o", "app.jsa"],
        )

        assert result.exit_code == 0
        assert "Dump process exited with status 1" in result.output

    @pytest.mark.requirement("CDS-DUMP-007")
    def test_debug_output(
        self,
        isolated_runner: CliRunner,
        classlist: Path,
        mocked_runtime: MagicMock,
    ) -> None:
        """--debug prints the command and the child's output."""
        result = isolated_runner.invoke(
            dump,
            ["--debug", "--java-home", "jdk", "--class-list", str(classlist), "-o", "app.jsa"],
        )

        assert result.exit_code == 0, result.output
        assert "Static dump to file app.jsa" in result.output
        assert "Static dump cmd:" in result.output
        assert "Dumping process 777 Stdout:" in result.output
        assert "dumping" in result.output

    def test_missing_class_list_source(
        self,
        isolated_runner: CliRunner,
        mocked_runtime: MagicMock,
        process_factory: MagicMock,
    ) -> None:
        """Without --class-list there is nothing to dump from."""
        result = isolated_runner.invoke(dump, ["--java-home", "jdk", "-o", "app.jsa"])

        assert result.exit_code == 1
        assert "class_list_source" in result.output
        process_factory.assert_not_called()

    def test_spawn_failure(
        self,
        isolated_runner: CliRunner,
        classlist: Path,
        mocked_runtime: MagicMock,
        process_factory: MagicMock,
    ) -> None:
        """A launcher that cannot start is a system error."""
        process_factory.side_effect = PermissionError("jdk/bin/java")

        result = isolated_runner.invoke(
            dump,
            ["--java-home", "jdk", "--class-list", str(classlist), "-o", "app.jsa"],
        )

        assert result.exit_code == 2
        assert "Dump failed" in result.output

    def test_dynamic_needs_running_vm(self, isolated_runner: CliRunner) -> None:
        """The standalone host cannot write dynamic archives."""
        result = isolated_runner.invoke(dump, ["--dynamic", "-o", "top.jsa"])
        assert result.exit_code == 1
        assert "not supported" in result.output
