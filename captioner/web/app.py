#!/usr/bin/env python3
from __future__ import annotations

import io
import threading
from typing import Any, Dict, List, Tuple
from flask import Flask, request, jsonify, send_file
from PIL import UnidentifiedImageError

from captioner.config import ConfigManager, DEFAULT_PRESET, PRESETS, resolve_preset
from captioner.application.pipeline import CaptionPipeline, SourceExhausted
from captioner.bootstrap import build_pipeline
from captioner.domain.errors import CaptionError

# Adapters
from captioner.adapters.stdout_logger import StdoutLogger
from captioner.adapters.pillow_fonts import FontRegistry

# Recent log lines (polled by /logs)
LOGS: List[str] = []
MAX_LOGS = 500

def ui_log(line: str) -> None:
    LOGS.append(line)
    del LOGS[:-MAX_LOGS]

LOGGER = StdoutLogger(sink=ui_log)
FONTS = FontRegistry(LOGGER)
_PIPELINES: Dict[Tuple[Any, ...], CaptionPipeline] = {}
_LOCK = threading.Lock()

def get_pipeline(preset: str = "") -> CaptionPipeline:
    cfg = ConfigManager.load()
    name = preset or cfg.preset
    # one pipeline per resolved preset and source settings
    key = (resolve_preset(cfg, name), cfg.comic_endpoint, cfg.fetch_timeout, cfg.max_fetch_attempts)
    with _LOCK:
        if key not in _PIPELINES:
            _PIPELINES[key] = build_pipeline(cfg, LOGGER, FONTS, name)
        return _PIPELINES[key]

def png_response(data: bytes):
    return send_file(io.BytesIO(data), mimetype="image/png", download_name="caption.png")

app = Flask(__name__)

@app.errorhandler(CaptionError)
def bad_caption(e: CaptionError):
    return jsonify({"ok": False, "error": str(e)}), 400

@app.errorhandler(UnidentifiedImageError)
def bad_image(e: UnidentifiedImageError):
    return jsonify({"ok": False, "error": "Unsupported or corrupt image."}), 400

@app.errorhandler(SourceExhausted)
def no_comic(e: SourceExhausted):
    return jsonify({"ok": False, "error": str(e)}), 502

@app.get("/presets")
def presets():
    return jsonify({"presets": sorted(PRESETS), "default": ConfigManager.load().preset or DEFAULT_PRESET})

@app.post("/layout")
def plan_layout():
    body = request.get_json(silent=True) or {}
    try:
        width = float(body["image_width"])
        height = float(body["image_height"])
    except (KeyError, TypeError, ValueError):
        return jsonify({"ok": False, "error": "image_width and image_height are required numbers."}), 400
    pipeline = get_pipeline(str(body.get("preset") or ""))
    plan, lines = pipeline.plan(str(body.get("caption") or ""), width, height)
    out = plan.to_dict()
    out["lines"] = [ln.text for ln in lines]
    return jsonify({"ok": True, "plan": out})

@app.post("/caption")
def caption_upload():
    upload = request.files.get("image")
    if not upload or not upload.filename:
        return jsonify({"ok": False, "error": "An image upload is required."}), 400
    pipeline = get_pipeline(request.form.get("preset", "").strip())
    data = pipeline.caption_bytes(upload.read(), request.form.get("caption", ""))
    return png_response(data)

@app.post("/random")
def caption_random():
    body = request.get_json(silent=True) or {}
    pipeline = get_pipeline(str(body.get("preset") or ""))
    data = pipeline.caption_random_comic(str(body.get("text") or ""))
    return png_response(data)

@app.get("/logs")
def logs():
    return jsonify({"lines": LOGS})

if __name__ == "__main__":
    app.run("127.0.0.1", 5000, debug=True)
