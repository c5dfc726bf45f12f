"""Unit tests for artifact building and packaging."""

import hashlib
import os
import shutil
import zipfile
from pathlib import Path

import pytest

from github_release_manager.artifacts.builder import (
    DEFAULT_TARGETS,
    ArtifactBuildError,
    ArtifactBuilder,
    BuildTarget,
    archive_name,
    artifact_name,
    write_checksum_file,
)

requires_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="POSIX shell not available")

# Writes "<GOOS> <GOARCH> <version>" to the output path passed as $0.
WRITE_TARGET_COMMAND = "sh -c 'printf \"%s %s {version}\" \"$GOOS\" \"$GOARCH\" > \"$0\"' {output}"


def test_artifact_names() -> None:
    """Test the naming of binaries and the archive."""
    assert artifact_name("duckduckgo-chat-cli", "1.2.0", BuildTarget("linux", "amd64")) == "duckduckgo-chat-cli_v1.2.0_linux_amd64"
    assert artifact_name("duckduckgo-chat-cli", "1.2.0", BuildTarget("windows", "amd64")) == "duckduckgo-chat-cli_v1.2.0_windows_amd64.exe"
    assert archive_name("duckduckgo-chat-cli", "1.2.0") == "duckduckgo-chat-cli_v1.2.0_release.zip"


def test_default_targets() -> None:
    """Test the default build matrix."""
    assert [str(target) for target in DEFAULT_TARGETS] == ["linux/amd64", "windows/amd64", "darwin/arm64", "darwin/amd64"]


def test_parse_build_target() -> None:
    """Test parsing os/arch strings."""
    assert BuildTarget.parse("darwin/arm64") == BuildTarget("darwin", "arm64")


@pytest.mark.parametrize("value", ["linux", "linux/", "/amd64", ""])
def test_parse_build_target_invalid(value: str) -> None:
    """Test that malformed targets are rejected."""
    with pytest.raises(ValueError, match="os/arch"):
        BuildTarget.parse(value)


def test_write_checksum_file(tmp_path: Path) -> None:
    """Test the sha256sum-compatible checksum file."""
    binary = tmp_path / "tool_v1.0.0_linux_amd64"
    binary.write_bytes(b"binary content")

    checksum = write_checksum_file(binary)

    assert checksum.name == "tool_v1.0.0_linux_amd64.sha256"
    assert checksum.read_text() == f"{hashlib.sha256(b'binary content').hexdigest()}  tool_v1.0.0_linux_amd64\n"


@requires_sh
def test_build_produces_all_artifacts(tmp_path: Path) -> None:
    """Test a full build: binaries, checksums, and the archive."""
    build_dir = tmp_path / "build"
    builder = ArtifactBuilder(source_dir=tmp_path, build_dir=build_dir, binary_name="tool", build_command=WRITE_TARGET_COMMAND)

    artifacts = builder.build("1.2.0")

    assert [path.name for path in artifacts.binaries] == [
        "tool_v1.2.0_linux_amd64",
        "tool_v1.2.0_windows_amd64.exe",
        "tool_v1.2.0_darwin_arm64",
        "tool_v1.2.0_darwin_amd64",
    ]
    assert (build_dir / "tool_v1.2.0_windows_amd64.exe").read_text() == "windows amd64 1.2.0"
    assert len(artifacts.checksums) == 4
    assert artifacts.archive == build_dir / "tool_v1.2.0_release.zip"
    with zipfile.ZipFile(artifacts.archive) as archive:
        assert sorted(archive.namelist()) == sorted(path.name for path in [*artifacts.binaries, *artifacts.checksums])
    assert len(artifacts.all_files()) == 9
    assert os.access(build_dir / "tool_v1.2.0_linux_amd64", os.X_OK)


@requires_sh
def test_build_empties_build_dir(tmp_path: Path) -> None:
    """Test that leftovers from earlier builds are removed."""
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    (build_dir / "tool_v0.9.0_linux_amd64").write_text("stale")
    builder = ArtifactBuilder(
        source_dir=tmp_path, build_dir=build_dir, binary_name="tool", build_command=WRITE_TARGET_COMMAND, targets=(BuildTarget("linux", "amd64"),)
    )

    builder.build("1.0.0")

    assert not (build_dir / "tool_v0.9.0_linux_amd64").exists()


@requires_sh
def test_build_output_path_with_spaces(tmp_path: Path) -> None:
    """Test that output paths are quoted in the command."""
    build_dir = tmp_path / "build dir"
    builder = ArtifactBuilder(
        source_dir=tmp_path, build_dir=build_dir, binary_name="tool", build_command=WRITE_TARGET_COMMAND, targets=(BuildTarget("linux", "arm64"),)
    )

    artifacts = builder.build("1.0.0")

    assert artifacts.binaries[0].read_text() == "linux arm64 1.0.0"


@requires_sh
def test_build_failure_raises(tmp_path: Path) -> None:
    """Test that a failing build command stops the build with the failing target."""
    builder = ArtifactBuilder(
        source_dir=tmp_path, build_dir=tmp_path / "build", build_command="sh -c 'echo boom >&2; exit 3' {output}", targets=(BuildTarget("linux", "amd64"),)
    )

    with pytest.raises(ArtifactBuildError, match="exit code 3: boom") as exc_info:
        builder.build("1.0.0")

    assert exc_info.value.target == BuildTarget("linux", "amd64")


@requires_sh
def test_build_without_output_raises(tmp_path: Path) -> None:
    """Test that a command which succeeds without writing the binary is a failure."""
    builder = ArtifactBuilder(source_dir=tmp_path, build_dir=tmp_path / "build", build_command="sh -c 'true' {output}")

    with pytest.raises(ArtifactBuildError, match="did not produce"):
        builder.build("1.0.0")


def test_missing_build_command_raises(tmp_path: Path) -> None:
    """Test that a build command that cannot be found is reported."""
    builder = ArtifactBuilder(source_dir=tmp_path, build_dir=tmp_path / "build", build_command="definitely-not-a-compiler -o {output}")

    with pytest.raises(ArtifactBuildError, match="not found"):
        builder.build("1.0.0")


def test_unwritable_build_dir_raises_build_error(tmp_path: Path) -> None:
    """Test that filesystem failures while preparing the build directory become build errors."""
    blocker = tmp_path / "build"
    blocker.write_text("not a directory")
    builder = ArtifactBuilder(build_dir=blocker / "out", binary_name="tool", build_command="true {output}")

    with pytest.raises(ArtifactBuildError, match="Preparing release artifacts"):
        builder.build("1.0.0")


@pytest.mark.parametrize(
    "build_command",
    [
        pytest.param("go build -o {output} -ldflags {ldflags}", id="unknown placeholder"),
        pytest.param("go build -o {output} {0}", id="positional placeholder"),
        pytest.param("go build -o {output} 'unterminated", id="unbalanced quote"),
    ],
)
def test_invalid_build_command_template_raises_build_error(tmp_path: Path, build_command: str) -> None:
    """Test that a malformed command template fails with the offending target."""
    builder = ArtifactBuilder(build_dir=tmp_path / "build", binary_name="tool", build_command=build_command, targets=(BuildTarget("linux", "amd64"),))

    with pytest.raises(ArtifactBuildError, match="Invalid build command template") as exc_info:
        builder.build("1.0.0")

    assert exc_info.value.target == BuildTarget("linux", "amd64")
