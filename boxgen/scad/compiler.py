"""
OpenSCAD compiler wrapper — writes assembly SCAD files and runs the
openscad CLI for syntax checking and STL rendering.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from pathlib import Path

from .builder import Assembly
from .csg import to_scad, union

log = logging.getLogger(__name__)


def _find_openscad() -> str | None:
    """Locate the openscad binary."""
    # Try PATH first
    path = shutil.which("openscad")
    if path:
        return path
    # Common Windows locations
    for candidate in [
        r"C:\Program Files\OpenSCAD\openscad.exe",
        r"C:\Program Files (x86)\OpenSCAD\openscad.exe",
    ]:
        if Path(candidate).exists():
            return candidate
    return None


def _null_device() -> str:
    return "NUL" if sys.platform == "win32" else "/dev/null"


def check_scad(scad_path: Path) -> tuple[bool, str]:
    """
    Syntax-check an OpenSCAD file without rendering.

    Returns (ok, message).
    """
    exe = _find_openscad()
    if not exe:
        return False, "OpenSCAD not found on PATH."

    try:
        result = subprocess.run(
            [exe, "-o", _null_device(), str(scad_path)],
            capture_output=True,
            text=True,
            timeout=30,
        )
    except subprocess.TimeoutExpired:
        return False, "OpenSCAD timed out (30s)."
    except OSError as e:
        return False, str(e)
    stderr = result.stderr.strip()
    if result.returncode == 0:
        return True, stderr or "OK"
    return False, stderr or f"OpenSCAD exited with code {result.returncode}"


def compile_scad(scad_path: Path, stl_path: Path | None = None) -> tuple[bool, str, Path | None]:
    """
    Compile an OpenSCAD file to STL.

    Returns (ok, message, stl_path_or_none).
    """
    exe = _find_openscad()
    if not exe:
        return False, "OpenSCAD not found on PATH.", None

    if stl_path is None:
        stl_path = scad_path.with_suffix(".stl")

    try:
        result = subprocess.run(
            [exe, "-o", str(stl_path), str(scad_path)],
            capture_output=True,
            text=True,
            timeout=600,
        )
    except subprocess.TimeoutExpired:
        return False, "OpenSCAD timed out (600s).", None
    except OSError as e:
        return False, str(e), None
    stderr = result.stderr.strip()
    if result.returncode == 0 and stl_path.exists():
        return True, stderr or "OK", stl_path
    return False, stderr or f"OpenSCAD exited with code {result.returncode}", None


def assembly_sources(assembly: Assembly) -> dict[str, str]:
    """SCAD source for each exported part, keyed by file stem."""
    return {
        "body": to_scad(assembly.body, "Enclosure body"),
        "lid": to_scad(assembly.lid, "Enclosure lid"),
        "preview": to_scad(
            union(assembly.preview_body, assembly.preview_lid),
            "Preview: body and lid side by side",
        ),
    }


def write_assembly(assembly: Assembly, out_dir: Path) -> dict[str, Path]:
    """Write body.scad, lid.scad and preview.scad into *out_dir*."""
    out_dir.mkdir(parents=True, exist_ok=True)
    paths: dict[str, Path] = {}
    for stem, source in assembly_sources(assembly).items():
        p = out_dir / f"{stem}.scad"
        p.write_text(source, encoding="utf-8")
        paths[stem] = p
    log.info("Wrote %d SCAD file(s) to %s", len(paths), out_dir)
    return paths


def compile_assembly(scad_paths: dict[str, Path]) -> dict[str, tuple[bool, str, Path | None]]:
    """Compile the exported body and lid SCAD files to STL.

    The preview file is only syntax-checked.
    """
    results = {}
    if "preview" in scad_paths:
        ok, msg = check_scad(scad_paths["preview"])
        if not ok:
            log.warning("preview.scad check failed: %s", msg)
    for stem in ("body", "lid"):
        if stem in scad_paths:
            results[stem] = compile_scad(scad_paths[stem])
            ok, msg, _ = results[stem]
            if not ok:
                log.warning("STL export of %s failed: %s", stem, msg)
    return results
