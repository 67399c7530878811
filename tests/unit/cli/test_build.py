"""Unit tests for the wrangler build command."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner
from fakes import BROKEN_SOURCE, RecordingFactory

from wrangler_cli.commands.build import build
from wrangler_cli.main import cli


class TestBuildCommand:
    """Tests for the build command."""

    def test_builds_from_config(
        self, isolated_runner: CliRunner, project: Path, fake_backend: RecordingFactory
    ) -> None:
        """Test build compiles everything listed by wrangler.yaml."""
        result = isolated_runner.invoke(build, [])

        assert result.exit_code == 0, result.output
        assert "Compiled build/spirv/a.spv_vert" in result.output
        assert "Compiled build/spirv/post/b.spv_frag" in result.output
        assert "2 compiled, 0 failed, 0 up to date" in result.output
        assert Path("build/spirv/a.spv_vert").exists()
        assert Path("build/record.json").exists()

    def test_second_build_is_up_to_date(
        self, isolated_runner: CliRunner, project: Path, fake_backend: RecordingFactory
    ) -> None:
        """Test an unchanged tree reports up to date."""
        isolated_runner.invoke(build, [])
        result = isolated_runner.invoke(build, [])

        assert result.exit_code == 0
        assert "Up to date (2 shader(s))" in result.output
        assert fake_backend.init_count == 1

    def test_through_group(
        self, isolated_runner: CliRunner, project: Path, fake_backend: RecordingFactory
    ) -> None:
        """Test build invoked through the root group."""
        result = isolated_runner.invoke(cli, ["--no-color", "build"])
        assert result.exit_code == 0, result.output
        assert "2 compiled" in result.output

    def test_kind_override(
        self, isolated_runner: CliRunner, project: Path, fake_backend: RecordingFactory
    ) -> None:
        """Test --kind narrows the kinds from the config file."""
        result = isolated_runner.invoke(build, ["--kind", "fragment"])

        assert result.exit_code == 0, result.output
        assert [Path(i).name for i in fake_backend.compiler.compiled_identifiers] == ["b.frag"]

    def test_flags_without_config_file(
        self,
        isolated_runner: CliRunner,
        create_shader: Callable[..., Path],
        fake_backend: RecordingFactory,
    ) -> None:
        """Test a complete flag set needs no config file."""
        create_shader("cull.comp")

        result = isolated_runner.invoke(
            build, ["-s", "shaders", "-o", "out", "-k", "compute"]
        )

        assert result.exit_code == 0, result.output
        assert Path("out/cull.spv_comp").exists()
        record = json.loads(Path("out/.wrangler-record.json").read_text())
        assert list(record["modified_times"]) == ["shaders/cull.comp"]

    def test_strict_failure_exit_code(
        self,
        isolated_runner: CliRunner,
        project: Path,
        create_shader: Callable[..., Path],
        fake_backend: RecordingFactory,
    ) -> None:
        """Test a strict failure exits 1 and keeps successful outputs."""
        create_shader("post/b.frag", BROKEN_SOURCE)

        result = isolated_runner.invoke(build, [])

        assert result.exit_code == 1
        assert "Compiled build/spirv/a.spv_vert" in result.output
        assert "ShaderCompilationError" in result.output
        assert "Encountered errors compiling 1 file(s)" in result.output
        # The successful shader is recorded despite the failure
        record = json.loads(Path("build/record.json").read_text())
        assert list(record["modified_times"]) == ["shaders/a.vert"]

    def test_strict_failure_listed_once(
        self,
        isolated_runner: CliRunner,
        project: Path,
        create_shader: Callable[..., Path],
        fake_backend: RecordingFactory,
    ) -> None:
        """Test each failed shader appears once in the strict-mode output."""
        create_shader("post/b.frag", BROKEN_SOURCE)

        result = isolated_runner.invoke(build, [])

        assert result.exit_code == 1
        assert result.output.count("ShaderCompilationError") == 1
        assert result.output.count("Encountered errors compiling") == 1

    def test_best_effort_flag(
        self,
        isolated_runner: CliRunner,
        project: Path,
        create_shader: Callable[..., Path],
        fake_backend: RecordingFactory,
    ) -> None:
        """Test --best-effort reports failures and exits 0."""
        create_shader("post/b.frag", BROKEN_SOURCE)

        result = isolated_runner.invoke(build, ["--best-effort"])

        assert result.exit_code == 0, result.output
        assert "1 compiled, 1 failed, 0 up to date" in result.output

    def test_missing_config(self, isolated_runner: CliRunner) -> None:
        """Test build without a config file fails with exit code 1."""
        result = isolated_runner.invoke(build, [])
        assert result.exit_code == 1
        assert "Configuration not found" in result.output

    def test_invalid_config(self, isolated_runner: CliRunner) -> None:
        """Test a schema error in wrangler.yaml is reported."""
        Path("wrangler.yaml").write_text("to_compile: []\nsearch_root: s\n")
        result = isolated_runner.invoke(build, [])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_config_path_is_a_directory(
        self, isolated_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test an unreadable config path is reported without a traceback."""
        Path("configs").mkdir()
        monkeypatch.setenv("WRANGLER_CONFIG", "configs")

        result = isolated_runner.invoke(build, [])

        assert result.exit_code == 1
        assert "Cannot read configuration file" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_unsupported_kind_in_config(
        self, isolated_runner: CliRunner, create_shader: Callable[..., Path]
    ) -> None:
        """Test an unsupported kind is a user error."""
        create_shader("a.vert")
        Path("wrangler.yaml").write_text(
            "to_compile: [geometry]\nsearch_root: shaders\n"
            "output_root: out\nrecord_path: out/record.json\n"
        )
        result = isolated_runner.invoke(build, [])
        assert result.exit_code == 1
        assert "Kind 'geometry' not supported by wrangler" in result.output

    def test_compiler_unavailable(
        self, isolated_runner: CliRunner, project: Path, fake_backend: RecordingFactory
    ) -> None:
        """Test an unusable compiler exits with code 2."""
        fake_backend.broken = True
        result = isolated_runner.invoke(build, [])
        assert result.exit_code == 2
        assert "Error initializing the shader compiler" in result.output
