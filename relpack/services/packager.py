"""Release packaging orchestration.

One run signs the staging folder, archives whichever of client, server and
web server were built, and finally signs the setup installers:

1. Launch every signing step, then drain them in plan order (banner first).
2. Create `.build/win32-<arch>`.
3. Client, server and web packaging, one after another, each gated on its
   built flag. Archiving is never overlapped.
4. Client only: sign the system and user setup packages.

The first failing step ends the run. Artifacts already produced are left in
place.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relpack.core.config import PackagerConfig
from relpack.core.result import Err, Ok, Result
from relpack.output.banner import print_banner
from relpack.output.console import ConsoleProtocol
from relpack.services.archive import Archiver, SevenZipArchiver
from relpack.services.installers import (
    DEFAULT_NPM,
    NpmRunAllTaskRunner,
    TaskRunner,
    setup_tasks,
)
from relpack.services.layout import CODESIGN_SUMMARY_PATTERN, ReleaseLayout
from relpack.services.metadata import MetadataReader, PackageJsonReader
from relpack.services.packaging_errors import (
    ArchiveFailed,
    ListingFailed,
    OutputDirFailed,
    PackagerError,
    SetupSigningFailed,
    SignFailed,
)
from relpack.services.signing import (
    EsrpSigner,
    Signer,
    build_signing_plan,
    drain_signing_tasks,
    launch_signing_plan,
)

__all__ = ["PackageReport", "ReleasePackager"]

CLIENT_TITLE = "Package client"
SERVER_TITLE = "Package server"
WEB_TITLE = "Package server (web)"
SETUP_TITLE = "Sign setup packages (system, user)"


@dataclass(frozen=True, slots=True)
class PackageReport:
    """What a successful run produced."""

    signed: tuple[str, ...]
    archives: tuple[Path, ...]
    client_version: str | None
    setup_signed: bool


class ReleasePackager:
    def __init__(
        self,
        *,
        config: PackagerConfig,
        console: ConsoleProtocol,
        signer: Signer,
        archiver: Archiver,
        metadata: MetadataReader,
        task_runner: TaskRunner,
    ) -> None:
        self._config = config
        self._console = console
        self._signer = signer
        self._archiver = archiver
        self._metadata = metadata
        self._task_runner = task_runner
        self._layout = ReleaseLayout(arch=config.arch)

    @classmethod
    def with_tools(
        cls,
        config: PackagerConfig,
        console: ConsoleProtocol,
        *,
        node: str = "node",
        sevenzip: str = "7z.exe",
        npm: str = DEFAULT_NPM,
    ) -> ReleasePackager:
        """Wire the packager to the real external tools."""
        return cls(
            config=config,
            console=console,
            signer=EsrpSigner(config, node=node),
            archiver=SevenZipArchiver(config.root, executable=sevenzip),
            metadata=PackageJsonReader(config.root),
            task_runner=NpmRunAllTaskRunner(config.root, npm=npm),
        )

    @property
    def layout(self) -> ReleaseLayout:
        return self._layout

    async def run(self) -> Result[PackageReport, PackagerError]:
        signed = await self.sign_staging()
        if isinstance(signed, Err):
            return signed

        out_dir = self.ensure_output_dir()
        if isinstance(out_dir, Err):
            return out_dir

        archives: list[Path] = []
        client_version: str | None = None

        if self._config.built_client:
            client = await self.package_client()
            if isinstance(client, Err):
                return client
            client_version, client_archive = client.value
            archives.append(client_archive)

        if self._config.built_server:
            server = await self._package(
                SERVER_TITLE, self._layout.server_archive, self._layout.server_source
            )
            if isinstance(server, Err):
                return server
            archives.append(server.value)

        if self._config.built_web:
            web = await self._package(
                WEB_TITLE, self._layout.web_archive, self._layout.web_source
            )
            if isinstance(web, Err):
                return web
            archives.append(web.value)

        setup_signed = False
        if self._config.built_client:
            setup = await self.sign_setup()
            if isinstance(setup, Err):
                return setup
            setup_signed = True

        return Ok(
            PackageReport(
                signed=tuple(signed.value),
                archives=tuple(archives),
                client_version=client_version,
                setup_signed=setup_signed,
            )
        )

    async def sign_staging(self) -> Result[list[str], SignFailed]:
        plan = build_signing_plan(self._config)

        launched = await launch_signing_plan(plan, self._signer)
        if isinstance(launched, Err):
            step, error = launched.error
            return Err(SignFailed(label=step.label, process=error))

        drained = await drain_signing_tasks(launched.value, self._console)
        if isinstance(drained, Err):
            task, error = drained.error
            return Err(SignFailed(label=task.label, process=error))
        return Ok(drained.value)

    def ensure_output_dir(self) -> Result[Path, OutputDirFailed]:
        path = self._config.root / self._layout.output_dir
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(OutputDirFailed(path=path, reason=str(e)))
        return Ok(path)

    async def package_client(self) -> Result[tuple[str, Path], PackagerError]:
        """Look up the product version, then archive the client tree.

        The version is read before the banner is printed, as it names the archive.
        """
        version = self._metadata.read_version(self._layout.client_manifest)
        if isinstance(version, Err):
            return version

        archive = self._layout.client_archive(version.value)
        packaged = await self._package(
            CLIENT_TITLE,
            archive,
            self._layout.client_source,
            exclude=CODESIGN_SUMMARY_PATTERN,
        )
        if isinstance(packaged, Err):
            return packaged
        return Ok((version.value, packaged.value))

    async def sign_setup(self) -> Result[None, SetupSigningFailed]:
        print_banner(self._console, SETUP_TITLE)
        result = await self._task_runner.run_parallel(
            setup_tasks(self._config.arch), sink=self._console.raw
        )
        if isinstance(result, Err):
            return Err(SetupSigningFailed(process=result.error))
        return Ok(None)

    async def _package(
        self,
        title: str,
        archive: Path,
        source: str,
        *,
        exclude: str | None = None,
    ) -> Result[Path, ArchiveFailed | ListingFailed]:
        print_banner(self._console, title)

        created = await self._archiver.create(
            archive, source, exclude=exclude, sink=self._console.raw
        )
        if isinstance(created, Err):
            return Err(ArchiveFailed(archive=archive, process=created.error))

        listed = await self._archiver.list_contents(archive, sink=self._console.raw)
        if isinstance(listed, Err):
            return Err(ListingFailed(archive=archive, process=listed.error))
        return Ok(archive)
