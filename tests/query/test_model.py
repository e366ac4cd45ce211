"""
Tests for llvmconfigkit.query.model module.
"""

import logging
import pytest
from pathlib import Path

from llvmconfigkit.core.exceptions import (
    ConfigUnavailableError,
    LaunchFailedError,
    MalformedFlagsError,
    MalformedVersionError,
    MissingComponentsError,
    NonZeroExitError,
    PartialConfigError,
    QueryKindError,
    QueryNotAvailableError,
)
from llvmconfigkit.core.platform import PlatformInfo
from llvmconfigkit.query.kinds import LinkMode
from llvmconfigkit.query.model import Config, ConfigBuilder, build
from llvmconfigkit.query.parsers import Version
from tests.fixtures.llvm_config import LLVM_18_OUTPUTS, FakeRunner, posix_only

EXE = Path("/usr/lib/llvm-18/bin/llvm-config")


def outputs(**overrides):
    table = dict(LLVM_18_OUTPUTS)
    for key, value in overrides.items():
        switch = "--" + key.replace("_", "-")
        if value is None:
            table.pop(switch, None)
        else:
            table[switch] = value
    return table


class TestBuild:
    """Tests for build() happy paths."""

    def test_default_queries(self, fake_runner):
        """Test a complete configuration from the default queries."""
        config = build(EXE, {"core", "support"}, runner=fake_runner)

        assert config.executable == EXE
        assert config.version == Version(18, 1, 8)
        assert {"core", "support", "x86"} <= config.components
        assert config.requested_components == {"core", "support"}
        assert config.flags("cflags") == (
            "-I/usr/lib/llvm-18/include",
            "-D_GNU_SOURCE",
            "-D__STDC_CONSTANT_MACROS",
        )
        assert config.flags("ldflags") == ("-L/usr/lib/llvm-18/lib",)
        assert config.flags("libs") == ("-lLLVM-18",)
        assert config.paths("includedir") == (Path("/usr/lib/llvm-18/include"),)
        assert config.paths("libdir") == (Path("/usr/lib/llvm-18/lib"),)
        assert not config.is_partial
        assert config.require_complete() is config

    def test_query_order_and_arguments(self, fake_runner):
        """Test version runs first, then components, then optional queries."""
        build(EXE, {"support", "core"}, runner=fake_runner)

        assert fake_runner.switches() == [
            "--version",
            "--components",
            "--cflags",
            "--ldflags",
            "--libs",
            "--includedir",
            "--libdir",
        ]
        libs_args = dict((args[0], args) for _, args in fake_runner.calls)["--libs"]
        assert libs_args == ("--libs", "core", "support")
        assert all(exe == EXE for exe, _ in fake_runner.calls)

    def test_link_mode(self, fake_runner):
        """Test link mode is passed to scoped queries only."""
        config = build(
            EXE, {"core"}, runner=fake_runner, link_mode="static", queries=["libs", "cflags"]
        )
        calls = dict((args[0], args) for _, args in fake_runner.calls)
        assert calls["--libs"] == ("--libs", "--link-static", "core")
        assert calls["--cflags"] == ("--cflags",)
        assert config.link_mode is LinkMode.STATIC

    def test_no_required_components(self, fake_runner):
        """Test scoped queries run unscoped when nothing is required."""
        config = build(EXE, runner=fake_runner, queries=["libs"])
        assert fake_runner.calls[-1][1] == ("--libs",)
        assert config.requested_components == frozenset()

    def test_single_component_string(self, fake_runner):
        """Test a bare string names one component."""
        config = build(EXE, "core", runner=fake_runner, queries=[])
        assert config.requested_components == {"core"}

    def test_extended_queries(self, fake_runner):
        """Test scalar, target and system-lib queries."""
        config = build(
            EXE,
            runner=fake_runner,
            queries=["host-target", "build-mode", "targets-built", "system-libs", "prefix"],
        )
        assert config.value("host-target") == "x86_64-pc-linux-gnu"
        assert config.value("build-mode") == "Release"
        assert config.targets == {"AArch64", "X86"}
        assert "-lzstd" in config.flags("system-libs")
        assert config.paths("prefix") == (Path("/usr/lib/llvm-18"),)

    def test_duplicate_queries_run_once(self, fake_runner):
        """Test a query listed twice runs once."""
        build(EXE, runner=fake_runner, queries=["cflags", "cflags"])
        assert fake_runner.switches().count("--cflags") == 1

    def test_path_separator(self):
        """Test multi-entry path output uses the given separator."""
        runner = FakeRunner(outputs(libdir="/a;;/b"))
        config = build(EXE, runner=runner, queries=["libdir"], path_separator=";")
        assert config.paths("libdir") == (Path("/a"), Path("/b"))

    def test_windows_platform(self):
        """Test Windows output keeps backslashes and splits on ';'."""
        runner = FakeRunner(
            outputs(cflags=r"-IC:\LLVM\include /MD", libdir=r"C:\LLVM\lib;D:\lib")
        )
        config = build(
            EXE,
            runner=runner,
            queries=["cflags", "libdir"],
            platform=PlatformInfo("windows", ";"),
        )
        assert config.flags("cflags") == (r"-IC:\LLVM\include", "/MD")
        assert config.paths("libdir") == (Path(r"C:\LLVM\lib"), Path(r"D:\lib"))

    def test_builder_reuse(self, fake_runner):
        """Test one builder can build several independent configs."""
        builder = ConfigBuilder(runner=fake_runner, queries=["cflags"])
        first = builder.build(EXE, {"core"})
        second = builder.build(Path("/other/llvm-config"), {"support"})
        assert first.requested_components == {"core"}
        assert second.requested_components == {"support"}
        assert second.executable == Path("/other/llvm-config")


class TestBuildRequiredQueries:
    """Tests for fatal failures of required queries."""

    def test_version_command_fails(self):
        """Test a failing version query raises ConfigUnavailableError."""
        runner = FakeRunner(outputs(version=None))
        with pytest.raises(ConfigUnavailableError) as exc_info:
            build(EXE, runner=runner)
        assert exc_info.value.stage == "version"
        assert isinstance(exc_info.value.cause, NonZeroExitError)
        assert runner.switches() == ["--version"]

    def test_version_unparsable(self):
        """Test an unreadable version raises ConfigUnavailableError."""
        runner = FakeRunner(outputs(version="unknown"))
        with pytest.raises(ConfigUnavailableError) as exc_info:
            build(EXE, runner=runner)
        assert isinstance(exc_info.value.__cause__, MalformedVersionError)

    def test_launch_failure(self):
        """Test a missing binary fails at the version stage."""
        error = LaunchFailedError(EXE, ["--version"], FileNotFoundError(2, "missing"))
        runner = FakeRunner({"--version": error})
        with pytest.raises(ConfigUnavailableError) as exc_info:
            build(EXE, runner=runner)
        assert exc_info.value.cause is error

    def test_components_command_fails(self):
        """Test a failing component query raises ConfigUnavailableError."""
        runner = FakeRunner(outputs(components=None))
        with pytest.raises(ConfigUnavailableError) as exc_info:
            build(EXE, runner=runner)
        assert exc_info.value.stage == "components"

    def test_missing_components(self):
        """Test absent components list the full available set."""
        runner = FakeRunner(outputs(components="Y Z"))
        with pytest.raises(MissingComponentsError) as exc_info:
            build(EXE, {"X"}, runner=runner)

        error = exc_info.value
        assert error.requested == {"X"}
        assert error.available == {"Y", "Z"}
        assert error.missing == {"X"}
        assert "--cflags" not in runner.switches()

    def test_empty_component_list(self):
        """Test an installation without components is valid if none are required."""
        runner = FakeRunner(outputs(components=""))
        config = build(EXE, runner=runner, queries=[])
        assert config.components == frozenset()


class TestBuildOptionalQueries:
    """Tests for lenient and strict handling of optional queries."""

    def test_lenient_records_failures(self, caplog):
        """Test lenient mode keeps successful fragments and records failures."""
        runner = FakeRunner(outputs(ldflags=None, cflags="-D'broken"))
        with caplog.at_level(logging.WARNING):
            config = build(EXE, {"core"}, runner=runner)

        assert config.is_partial
        assert set(config.failures) == {"cflags", "ldflags"}
        assert isinstance(config.failures["cflags"], MalformedFlagsError)
        assert isinstance(config.failures["ldflags"], NonZeroExitError)
        assert config.flags("libs") == ("-lLLVM-18",)
        assert config.paths("libdir") == (Path("/usr/lib/llvm-18/lib"),)
        assert "Partial configuration" in caplog.text

    def test_lenient_runs_every_query(self):
        """Test one failure doesn't stop later queries."""
        runner = FakeRunner(outputs(cflags=None))
        build(EXE, runner=runner)
        assert runner.switches()[-1] == "--libdir"

    def test_partial_error(self):
        """Test the combined partial error is available on demand."""
        runner = FakeRunner(outputs(includedir=None))
        config = build(EXE, runner=runner)

        assert isinstance(config.partial_error, PartialConfigError)
        assert set(config.partial_error.failures) == {"includedir"}
        with pytest.raises(PartialConfigError, match="includedir"):
            config.require_complete()

    def test_failed_fragment_not_defaulted(self):
        """Test reading a failed fragment raises instead of returning empty."""
        runner = FakeRunner(outputs(cflags=None))
        config = build(EXE, runner=runner)
        with pytest.raises(QueryNotAvailableError, match="failed"):
            config.flags("cflags")

    def test_strict_fails_fast(self):
        """Test strict mode stops on the first optional failure."""
        runner = FakeRunner(outputs(ldflags=None))
        with pytest.raises(ConfigUnavailableError) as exc_info:
            build(EXE, runner=runner, strict=True)

        assert exc_info.value.stage == "ldflags"
        assert isinstance(exc_info.value.cause, NonZeroExitError)
        assert "--libs" not in runner.switches()

    def test_strict_success(self, fake_runner):
        """Test strict mode with no failures gives a complete config."""
        config = build(EXE, runner=fake_runner, strict=True)
        assert not config.is_partial


class TestBuilderQueries:
    """Tests for optional query validation."""

    def test_unknown_query(self):
        """Test unknown query names are rejected up front."""
        with pytest.raises(QueryKindError):
            ConfigBuilder(queries=["cflag"])

    @pytest.mark.parametrize("name", ["version", "components"])
    def test_required_query_not_optional(self, name):
        """Test version and components can't be listed as optional."""
        with pytest.raises(QueryKindError, match="always queried"):
            ConfigBuilder(queries=[name])


class TestConfig:
    """Tests for Config accessors and immutability."""

    @pytest.fixture
    def config(self, fake_runner):
        return build(EXE, {"core"}, runner=fake_runner)

    def test_frozen(self, config):
        """Test fields can't be reassigned."""
        with pytest.raises(AttributeError):
            config.version = Version(1, 0, 0)

    def test_fragments_read_only(self, config):
        """Test the fragment mapping can't be mutated."""
        with pytest.raises(TypeError):
            config.fragments["cflags"] = ()

    def test_hashable(self, config):
        """Test configs hash despite their read-only mappings."""
        same = Config(
            config.executable,
            config.version,
            config.components,
            requested_components=config.requested_components,
            fragments=dict(config.fragments),
        )
        assert hash(config) == hash(same)
        assert len({config, same}) == 1

    def test_input_mapping_copied(self):
        """Test later changes to the input mapping don't leak in."""
        fragments = {"cflags": ("-O2",)}
        config = Config(EXE, Version(18, 1, 8), frozenset(), fragments=fragments)
        fragments["cflags"] = ("-O0",)
        assert config.flags("cflags") == ("-O2",)

    def test_not_queried(self, config):
        """Test reading a fragment that wasn't queried."""
        with pytest.raises(QueryNotAvailableError, match="not queried"):
            config.flags("cxxflags")

    def test_not_queried_is_key_error(self, config):
        """Test QueryNotAvailableError is also a KeyError."""
        with pytest.raises(KeyError):
            config.paths("cmakedir")

    def test_wrong_shape(self, config):
        """Test reading a paths query as flags is an error."""
        with pytest.raises(QueryKindError, match="paths query"):
            config.flags("includedir")

    def test_unknown_kind(self, config):
        """Test unknown kinds raise QueryKindError."""
        with pytest.raises(QueryKindError):
            config.paths("include-dir")

    def test_targets_not_queried(self, config):
        """Test targets need the 'targets-built' query."""
        with pytest.raises(QueryNotAvailableError):
            config.targets

    def test_queried_and_has_component(self, config):
        """Test convenience accessors."""
        assert config.queried == ("cflags", "ldflags", "libs", "includedir", "libdir")
        assert config.has_component("core")
        assert not config.has_component("nonexistent")

    def test_str(self, config):
        """Test string representation."""
        assert str(config) == f"LLVM 18.1.8 at {EXE}"


@posix_only
class TestBuildProcess:
    """Tests for build() against a fake llvm-config script."""

    def test_end_to_end(self, fake_llvm_config):
        """Test building from a real process."""
        config = build(fake_llvm_config, {"core", "support"}, link_mode=LinkMode.STATIC)
        assert config.version == Version(18, 1, 8)
        assert config.flags("libs") == ("-lLLVM-18", "--link-static", "core", "support")
        assert config.paths("includedir") == (Path("/usr/lib/llvm-18/include"),)
