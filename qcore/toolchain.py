"""
qcore/toolchain.py - Synthesis Toolchain Boundary

Adapters that hand a CircuitDesign to an external synthesis and
place-and-route flow. Tool output is captured as text for the log and
never interpreted; metrics come from formulas, not from the tools.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .errors import ToolchainFailure
from .synthesis import CircuitDesign

logger = logging.getLogger(__name__)

VERILOG_SUBDIR = "verilog"
BUILD_SUBDIR = "build"


@dataclass(frozen=True)
class ToolchainReport:
    """Outcome of one toolchain invocation."""
    status: str                  # "skipped" | "ok"
    output: str = ""
    artifacts: tuple = ()


class Toolchain:
    """Interface: synthesize(design, workdir) -> ToolchainReport."""

    name = "abstract"

    def synthesize(self, design: CircuitDesign, workdir: Union[str, Path]) -> ToolchainReport:
        raise NotImplementedError


class NullToolchain(Toolchain):
    """No external flow; every design is reported as skipped."""

    name = "none"

    def synthesize(self, design: CircuitDesign, workdir: Union[str, Path]) -> ToolchainReport:
        return ToolchainReport(status="skipped")


class YosysToolchain(Toolchain):
    """yosys synth_ice40 followed by nextpnr-ice40 place-and-route."""

    name = "yosys"

    def __init__(
        self,
        yosys_bin: str = "yosys",
        nextpnr_bin: str = "nextpnr-ice40",
        package: str = "tq144",
        timeout: Optional[float] = 600.0,
    ):
        self.yosys_bin = yosys_bin
        self.nextpnr_bin = nextpnr_bin
        self.package = package
        self.timeout = timeout

    def write_documents(self, design: CircuitDesign, workdir: Union[str, Path]) -> tuple:
        """
        Write verilog/quantum_core.v and verilog/quantum.pcf under workdir.

        Raises:
            ToolchainFailure: When the workspace cannot be written
        """
        verilog_dir = Path(workdir) / VERILOG_SUBDIR
        verilog_path = verilog_dir / "quantum_core.v"
        pcf_path = verilog_dir / "quantum.pcf"
        try:
            verilog_dir.mkdir(parents=True, exist_ok=True)
            verilog_path.write_text(design.verilog)
            pcf_path.write_text(design.pin_constraints)
        except OSError as exc:
            raise ToolchainFailure("write_documents", str(exc)) from exc
        return verilog_path, pcf_path

    def synthesize(self, design: CircuitDesign, workdir: Union[str, Path]) -> ToolchainReport:
        """
        Run synthesis then place-and-route for design.

        Raises:
            ToolchainFailure: Unwritable workspace, missing binary, timeout,
                or non-zero exit
        """
        workdir = Path(workdir)
        verilog_path, pcf_path = self.write_documents(design, workdir)
        build_dir = workdir / BUILD_SUBDIR
        try:
            build_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ToolchainFailure("write_documents", str(exc)) from exc
        stem = design.top_module
        json_path = build_dir / f"{stem}.json"
        asc_path = build_dir / f"{stem}.asc"

        outputs = [
            self._run("synthesis", [
                self.yosys_bin, "-p",
                f"read_verilog {verilog_path}; synth_ice40 -top {stem} -json {json_path}",
            ]),
            self._run("place_and_route", [
                self.nextpnr_bin,
                "--json", str(json_path),
                "--pcf", str(pcf_path),
                "--asc", str(asc_path),
                "--package", self.package,
                "--pcf-allow-unconstrained",
            ]),
        ]
        return ToolchainReport(
            status="ok",
            output="\n".join(outputs),
            artifacts=(str(verilog_path), str(pcf_path), str(json_path), str(asc_path)),
        )

    def _run(self, step: str, argv: List[str]) -> str:
        if shutil.which(argv[0]) is None:
            raise ToolchainFailure(step, f"{argv[0]} not found on PATH")
        logger.info("%s: %s", step, " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ToolchainFailure(step, f"timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise ToolchainFailure(step, str(exc)) from exc
        output = proc.stdout or ""
        for line in output.splitlines():
            logger.debug("[%s] %s", step, line)
        if proc.returncode != 0:
            raise ToolchainFailure(step, f"exit status {proc.returncode}", output)
        return output


def make_toolchain(name: str, **kwargs) -> Toolchain:
    """Toolchain by name: "none" or "yosys"."""
    if name == NullToolchain.name:
        return NullToolchain()
    if name == YosysToolchain.name:
        return YosysToolchain(**kwargs)
    raise ValueError(f"unknown toolchain {name!r}; expected 'none' or 'yosys'")
