"""Builds per-platform binaries, checksum files, and the combined release archive."""

import hashlib
import os
import shlex
import shutil
import stat
import subprocess
import zipfile
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from github_release_manager.utils.constants import DEFAULT_BINARY_NAME, DEFAULT_BUILD_COMMAND, DEFAULT_BUILD_DIR

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

_CHECKSUM_CHUNK_SIZE = 1024 * 1024


class ArtifactBuildError(Exception):
    """Raised when a binary cannot be built or packaged."""

    def __init__(self, message: str, target: "BuildTarget | None" = None) -> None:
        """Initializes the exception with the failing target, if any."""
        super().__init__(message)
        self.target = target


@dataclass(frozen=True)
class BuildTarget:
    """An operating system and architecture pair to build for."""

    os: str
    arch: str

    @property
    def executable_suffix(self) -> str:
        """File suffix of executables on the target operating system."""
        return ".exe" if self.os == "windows" else ""

    @classmethod
    def parse(cls, value: str) -> "BuildTarget":
        """Parse an 'os/arch' string such as 'linux/amd64'."""
        os_name, sep, arch = value.partition("/")
        if not sep or not os_name or not arch:
            raise ValueError(f"Build target must be in the format 'os/arch', got '{value}'")
        return cls(os_name, arch)

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


DEFAULT_TARGETS: tuple[BuildTarget, ...] = (
    BuildTarget("linux", "amd64"),
    BuildTarget("windows", "amd64"),
    BuildTarget("darwin", "arm64"),
    BuildTarget("darwin", "amd64"),
)


@dataclass
class BuildArtifacts:
    """Files produced for one release version."""

    binaries: list[Path] = field(default_factory=list)
    checksums: list[Path] = field(default_factory=list)
    archive: Path | None = None

    def all_files(self) -> list[Path]:
        """Return every file to attach to the release."""
        files = [*self.binaries, *self.checksums]
        if self.archive is not None:
            files.append(self.archive)
        return files


def artifact_name(binary_name: str, version: str, target: BuildTarget) -> str:
    """Return the file name of the binary built for a target."""
    return f"{binary_name}_v{version}_{target.os}_{target.arch}{target.executable_suffix}"


def archive_name(binary_name: str, version: str) -> str:
    """Return the file name of the combined release archive."""
    return f"{binary_name}_v{version}_release.zip"


def write_checksum_file(path: Path) -> Path:
    """Write `<file>.sha256` next to a file, in sha256sum output format."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHECKSUM_CHUNK_SIZE), b""):
            digest.update(chunk)
    checksum_path = path.with_name(f"{path.name}.sha256")
    checksum_path.write_text(f"{digest.hexdigest()}  {path.name}\n", encoding="utf-8")
    return checksum_path


def create_release_archive(archive_path: Path, files: list[Path]) -> Path:
    """Bundle files, stored by their base names, into a zip archive."""
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path in files:
            archive.write(path, arcname=path.name)
    logger.info("Created release archive", archive=str(archive_path), file_count=len(files))
    return archive_path


class ArtifactBuilder:
    """Runs the build command once per target and packages the results."""

    def __init__(
        self,
        source_dir: Path = Path("."),
        build_dir: Path = Path(DEFAULT_BUILD_DIR),
        binary_name: str = DEFAULT_BINARY_NAME,
        build_command: str = DEFAULT_BUILD_COMMAND,
        targets: tuple[BuildTarget, ...] = DEFAULT_TARGETS,
    ) -> None:
        """Initialize the builder.

        Args:
            source_dir: Directory the build command runs in.
            build_dir: Directory artifacts are written to; emptied before each build.
            binary_name: Base name of binaries and the archive.
            build_command: Command template with {version}, {output}, {os} and {arch} placeholders.
            targets: Platforms to build for.
        """
        self.source_dir = source_dir
        self.build_dir = build_dir
        self.binary_name = binary_name
        self.build_command = build_command
        self.targets = targets

    def _prepare_build_dir(self) -> None:
        if self.build_dir.exists():
            shutil.rmtree(self.build_dir)
        self.build_dir.mkdir(parents=True)

    def build_target(self, version: str, target: BuildTarget) -> Path:
        """Build the binary for one target and return its path."""
        output = self.build_dir.resolve() / artifact_name(self.binary_name, version, target)
        try:
            command = shlex.split(self.build_command.format(version=version, output=shlex.quote(str(output)), os=target.os, arch=target.arch))
        except (KeyError, IndexError, ValueError) as exc:
            raise ArtifactBuildError(f"Invalid build command template '{self.build_command}': {exc!r}", target) from exc
        env = {**os.environ, "GOOS": target.os, "GOARCH": target.arch}

        logger.info("Building binary", target=str(target), output=output.name)
        try:
            result = subprocess.run(command, cwd=self.source_dir, env=env, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise ArtifactBuildError(f"Build command not found: {command[0]}", target) from exc
        if result.returncode != 0:
            logger.error("Build failed", target=str(target), returncode=result.returncode, stderr=result.stderr.strip())
            raise ArtifactBuildError(f"Build for {target} failed with exit code {result.returncode}: {result.stderr.strip()}", target)
        if not output.is_file():
            raise ArtifactBuildError(f"Build for {target} did not produce {output.name}", target)
        return output

    def _check_linux_binary(self, binaries: list[Path]) -> None:
        linux_binaries = [path for path in binaries if "_linux_" in path.name]
        for path in linux_binaries:
            path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            logger.info("Linux binary is executable", binary=path.name)

    def build(self, version: str) -> BuildArtifacts:
        """Build all targets, write checksums, and create the release archive.

        Raises:
            ArtifactBuildError: If any target fails to build or the artifacts cannot be written.
        """
        logger.info("Building release artifacts", version=version, targets=[str(target) for target in self.targets])
        artifacts = BuildArtifacts()
        try:
            self._prepare_build_dir()
            for target in self.targets:
                artifacts.binaries.append(self.build_target(version, target))

            self._check_linux_binary(artifacts.binaries)
            artifacts.checksums = [write_checksum_file(path) for path in artifacts.binaries]
            artifacts.archive = create_release_archive(
                self.build_dir / archive_name(self.binary_name, version),
                [*artifacts.binaries, *artifacts.checksums],
            )
        except OSError as exc:
            logger.error("Preparing release artifacts failed", build_dir=str(self.build_dir), error=str(exc))
            raise ArtifactBuildError(f"Preparing release artifacts in {self.build_dir} failed: {exc}") from exc

        logger.info(
            "Built release artifacts",
            version=version,
            files=[path.name for path in artifacts.all_files()],
            total_bytes=sum(path.stat().st_size for path in artifacts.all_files()),
        )
        return artifacts
