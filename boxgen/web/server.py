"""
FastAPI web server — validation, layout and SCAD generation over HTTP.

Every request carries a flat parameter dict (the preset key format).
Keys that are missing fall back to the ESP32 default, or to a named
preset when ``preset`` is given.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from boxgen.config import DEFAULT_PRESET_NAME, default_params
from boxgen.core import GENERATION_FAILED_MESSAGE, Regenerator
from boxgen.pipeline.layout import derive_report
from boxgen.pipeline.params import ParameterSet, params_to_dict, parse_params
from boxgen.pipeline.validation import validate_params
from boxgen.presets import PresetError, PresetStore, store_path_from_env
from boxgen.scad import GenerationError, assembly_sources, build_assembly

log = logging.getLogger(__name__)

# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="boxgen")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Session state (persists across requests) ───────────────────────

_regenerator = Regenerator()


def get_store() -> PresetStore:
    return PresetStore(store_path_from_env())


def get_regenerator() -> Regenerator:
    return _regenerator


# ── Models ─────────────────────────────────────────────────────────

class ParamsRequest(BaseModel):
    params: dict[str, Any] = Field(default_factory=dict)
    preset: str | None = None


class SavePresetRequest(BaseModel):
    name: str
    params: dict[str, Any] = Field(default_factory=dict)


def _resolve(req: ParamsRequest, store: PresetStore) -> ParameterSet:
    base = None
    if req.preset:
        try:
            base = store.load_preset(req.preset)
        except KeyError:
            raise HTTPException(404, f"Preset '{req.preset}' not found.")
        except PresetError as e:
            raise HTTPException(409, str(e))
    return parse_params(req.params, base=base)


# ── Routes ─────────────────────────────────────────────────────────

@app.get("/api/defaults")
def get_defaults():
    return {"name": DEFAULT_PRESET_NAME, "params": params_to_dict(default_params())}


@app.post("/api/validate")
def validate(req: ParamsRequest, store: PresetStore = Depends(get_store)):
    return validate_params(_resolve(req, store)).to_dict()


@app.post("/api/derive")
def derive(req: ParamsRequest, store: PresetStore = Depends(get_store)):
    params = _resolve(req, store)
    result = validate_params(params)
    return {"validation": result.to_dict(), "layout": derive_report(params)}


@app.post("/api/generate")
def generate(req: ParamsRequest, store: PresetStore = Depends(get_store)):
    params = _resolve(req, store)
    result = validate_params(params)
    if not result.valid:
        raise HTTPException(422, {"errors": result.errors, "warnings": result.warnings})
    try:
        assembly = build_assembly(params)
    except GenerationError as e:
        log.warning("%s", e)
        raise HTTPException(500, GENERATION_FAILED_MESSAGE)
    return {"warnings": result.warnings, "scad": assembly_sources(assembly)}


@app.post("/api/regenerate")
def regenerate(
    req: ParamsRequest,
    store: PresetStore = Depends(get_store),
    regen: Regenerator = Depends(get_regenerator),
):
    outcome = regen.regenerate(_resolve(req, store))
    body = outcome.to_dict()
    if outcome.assembly is not None:
        body["scad"] = assembly_sources(outcome.assembly)
    return body


@app.get("/api/presets")
def list_presets(store: PresetStore = Depends(get_store)):
    return {"presets": store.list_presets()}


@app.get("/api/presets/{name}")
def get_preset(name: str, store: PresetStore = Depends(get_store)):
    try:
        return store.get_record(name)
    except KeyError:
        raise HTTPException(404, f"Preset '{name}' not found.")
    except PresetError as e:
        raise HTTPException(409, str(e))


@app.post("/api/presets")
def save_preset(req: SavePresetRequest, store: PresetStore = Depends(get_store)):
    params = parse_params(req.params)
    result = validate_params(params)
    if not result.valid:
        raise HTTPException(422, {"errors": result.errors, "warnings": result.warnings})
    if not store.save_preset(req.name, params):
        raise HTTPException(400, f"Cannot save over '{req.name.strip() or req.name}'.")
    return {"ok": True, "presets": store.list_presets()}


@app.delete("/api/presets/{name}")
def delete_preset(name: str, store: PresetStore = Depends(get_store)):
    if name == DEFAULT_PRESET_NAME:
        raise HTTPException(400, f"'{DEFAULT_PRESET_NAME}' cannot be deleted.")
    if not store.delete_preset(name):
        raise HTTPException(404, f"Preset '{name}' not found.")
    return {"ok": True, "presets": store.list_presets()}


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("boxgen.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
