import argparse
import json
import logging
import sys
from pathlib import Path

from boxgen.pipeline.layout import derive_report
from boxgen.pipeline.params import ParameterSet, params_to_dict, parse_params
from boxgen.pipeline.validation import validate_params
from boxgen.presets import PresetError, PresetStore, store_path_from_env
from boxgen.scad import GenerationError, build_assembly, compile_assembly, write_assembly

log = logging.getLogger(__name__)

EXIT_INVALID = 1
EXIT_GENERATION_FAILED = 2


def _add_param_source(p: argparse.ArgumentParser) -> None:
    p.add_argument("--params", default=None, help="Flat params JSON file, merged onto the base preset")
    p.add_argument("--preset", default=None, help="Base preset name (default: ESP32 Base)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="boxgen", description="Parametric 3D-printable enclosure generator")
    p.add_argument("--preset-file", default=None, help="Preset store JSON (default: $BOXGEN_PRESET_FILE, else ./outputs/presets.json)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    v = sub.add_parser("validate", help="Validate a parameter set")
    _add_param_source(v)

    d = sub.add_parser("derive", help="Print the derived layout (posts, vents, wire cutouts)")
    _add_param_source(d)

    g = sub.add_parser("generate", help="Write body/lid/preview SCAD files")
    _add_param_source(g)
    g.add_argument("--out", required=True, help="Output directory")
    g.add_argument("--compile", action="store_true", help="Also render STL with the openscad CLI")

    pr = sub.add_parser("presets", help="List or show stored presets")
    pr_sub = pr.add_subparsers(dest="presets_cmd", required=True)
    pr_sub.add_parser("list", help="List preset names")
    show = pr_sub.add_parser("show", help="Print one preset record")
    show.add_argument("name")

    sv = sub.add_parser("serve", help="Start the HTTP API server")
    sv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    sv.add_argument("--port", type=int, default=8000, help="Port to bind")

    return p


def _load_params(args, store: PresetStore) -> ParameterSet:
    base = store.load_preset(args.preset) if args.preset else None
    data = {}
    if args.params:
        data = json.loads(Path(args.params).read_text(encoding="utf-8"))
    return parse_params(data, base=base)


def _print_result(result) -> None:
    for e in result.errors:
        print(f"ERROR: {e}")
    for w in result.warnings:
        print(f"WARNING: {w}")


def run(args) -> int:
    store = PresetStore(Path(args.preset_file)) if args.preset_file else PresetStore(store_path_from_env())

    if args.cmd == "serve":
        from boxgen.web.server import main as serve_main
        serve_main(host=args.host, port=args.port)
        return 0

    if args.cmd == "presets":
        if args.presets_cmd == "list":
            for name in store.list_presets():
                print(name)
            return 0
        print(json.dumps(store.get_record(args.name), indent=2))
        return 0

    params = _load_params(args, store)
    result = validate_params(params)

    if args.cmd == "validate":
        _print_result(result)
        print("valid" if result.valid else "invalid")
        return 0 if result.valid else EXIT_INVALID

    if args.cmd == "derive":
        print(json.dumps({
            "params": params_to_dict(params),
            "validation": result.to_dict(),
            "layout": derive_report(params),
        }, indent=2))
        return 0

    if args.cmd == "generate":
        _print_result(result)
        if not result.valid:
            return EXIT_INVALID
        try:
            assembly = build_assembly(params)
        except GenerationError as e:
            log.error("%s", e)
            print("Geometry generation failed.")
            return EXIT_GENERATION_FAILED
        out_dir = Path(args.out).resolve()
        paths = write_assembly(assembly, out_dir)
        if args.compile:
            for stem, (ok, msg, _) in compile_assembly(paths).items():
                print(f"{stem}.stl: {'OK' if ok else msg}")
        print(f"Generated outputs in: {out_dir}")
        return 0

    return 2


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except KeyError as e:
        print(f"Preset not found: {e.args[0]}", file=sys.stderr)
        return EXIT_INVALID
    except PresetError as e:
        print(str(e), file=sys.stderr)
        return EXIT_INVALID
