#!/usr/bin/env python3
"""
web_remote.py  –  web UI + diagnostics + remote control for on-site tuning

Endpoints
---------
/               → HTML page with buttons, channel status, diagnostics, link to /log
/status         → JSON object with bezel geometry and per-channel state
/diag, /data    → JSON object of diagnostic metrics
/action?cmd=…   → inject control commands (calib, bezel_up, bezel_down, hud, quit)
/log            → contents of runtime.log (if present)
"""

from __future__ import annotations
import http.server
import logging
import socketserver
import threading
import urllib.parse
import json
import time
import os
import traceback
import psutil
import platform
from typing import TYPE_CHECKING, Any

from events  import EventManager
from logutil import LOGFILE

if TYPE_CHECKING:                       # avoid circular import at runtime
    from app import FlowerWall

log = logging.getLogger("flowerwall.web")

# ── diagnostics refresh cadence ───────────────────────────────────────────
_last_diag_time = 0.0
_diag_interval  = 1.0

# ── global diagnostic store ───────────────────────────────────────────────
monitor_data: dict[str, Any] = {
    "cpu_percent":       0.0,
    "mem_used":          "0 MB",
    "mem_total":         "0 MB",
    "script_uptime":     "0d 00:00:00",
    "machine_uptime":    "0d 00:00:00",
    "load_avg":          "",
    "last_http_crash":   "",
    "python_version":    platform.python_version(),
}

_script_start = time.monotonic()
_boot_time    = psutil.boot_time()

# cmd → action posted to the frame loop
ACTIONS: dict[str, dict] = {
    "calib":      {"type": "toggle_calibration"},
    "bezel_up":   {"type": "adjust_bezel", "delta": +1},
    "bezel_down": {"type": "adjust_bezel", "delta": -1},
    "hud":        {"type": "toggle_hud"},
    "quit":       {"type": "quit"},
}


# ── helpers ────────────────────────────────────────────────────────────────
def _fmt_duration(secs: float) -> str:
    d, rem = divmod(int(secs), 86400)
    h, rem = divmod(rem, 3600)
    m, s   = divmod(rem, 60)
    return f"{d}d {h:02}:{m:02}:{s:02}"


def _maybe_update_diagnostics() -> None:
    global _last_diag_time
    now = time.monotonic()
    if now - _last_diag_time >= _diag_interval:
        _last_diag_time = now
        _update_diagnostics()


def _update_diagnostics() -> None:
    """Refresh CPU, memory, uptime and load in `monitor_data`."""
    monitor_data["cpu_percent"] = psutil.cpu_percent()
    vm = psutil.virtual_memory()
    monitor_data["mem_used"]  = f"{vm.used // 1024**2} MB"
    monitor_data["mem_total"] = f"{vm.total // 1024**2} MB"
    now = time.monotonic()
    monitor_data["script_uptime"]  = _fmt_duration(now - _script_start)
    monitor_data["machine_uptime"] = _fmt_duration(time.time() - _boot_time)
    try:
        la = os.getloadavg()
        monitor_data["load_avg"] = ", ".join(f"{x:.2f}" for x in la)
    except OSError:
        monitor_data["load_avg"] = "N/A"


def post_command(cmd: str) -> bool:
    """Queue the action for *cmd*; False if the command is unknown."""
    act = ACTIONS.get(cmd)
    if act is None:
        return False
    EventManager.post(dict(act))
    return True


# ── reusable threaded HTTP server ──────────────────────────────────────────
class ReusableTCPServer(socketserver.ThreadingMixIn, http.server.HTTPServer):
    daemon_threads      = True
    allow_reuse_address = True


# ── request handler ────────────────────────────────────────────────────────
class RemoteHandler(http.server.BaseHTTPRequestHandler):
    def log_message(self, *args):
        return  # silence default logging

    def do_GET(self):
        parsed = urllib.parse.urlparse(self.path)
        path, qs = parsed.path, parsed.query

        if path == "/":
            return self._serve_html()
        if path == "/status":
            return self._serve_json(self.server.wall.status())   # type: ignore
        if path in ("/diag", "/data"):
            _maybe_update_diagnostics()
            return self._serve_json(monitor_data)
        if path == "/log":
            return self._serve_log()
        if path == "/action":
            return self._serve_action(qs)

        self.send_error(404, "Not found")

    # ── helpers for each route ───────────────────────────────────────────
    def _serve_html(self):
        self.send_response(200)
        self.send_header("Content-Type", "text/html")
        self.end_headers()
        self.wfile.write(HTML_PAGE.encode("utf-8"))

    def _serve_json(self, obj: Any):
        b = json.dumps(obj).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(b)))
        self.end_headers()
        self.wfile.write(b)

    def _serve_log(self):
        try:
            with open(LOGFILE, "rb") as fh:
                data = fh.read()
        except OSError:
            return self.send_error(404, "Log file not found")
        self.send_response(200)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _serve_action(self, query: str):
        qs  = urllib.parse.parse_qs(query)
        cmd = qs.get("cmd", [""])[0]
        if not post_command(cmd):
            return self.send_error(400, "Unknown cmd")
        self.send_response(204)
        self.end_headers()


# ── simple HTML UI ─────────────────────────────────────────────────────────
HTML_PAGE = """
<!doctype html><html><head><meta charset="utf-8">
<title>Flower Wall Remote</title>
<style>
 body{background:#000;color:#0f0;font-family:monospace;padding:1em;}
 a.button{display:inline-block;margin:4px;padding:6px 12px;border:1px solid #0f0;
          text-decoration:none;color:#0f0;}
 pre{margin:0.5em 0;font-family:monospace;}
</style></head><body>
<h2>Flower Wall Remote</h2>
<a class="button" href="#" onclick="act('calib')">Toggle calibration</a>
<a class="button" href="#" onclick="act('bezel_down')">Bezel −1</a>
<a class="button" href="#" onclick="act('bezel_up')">Bezel +1</a>
<a class="button" href="#" onclick="act('hud')">Toggle HUD</a>
<a class="button" href="#" onclick="act('quit')">Quit</a>
<a class="button" href="/log">View log</a>

<div><h3>Status</h3><pre id="status"></pre></div>
<div><h3>Diagnostics</h3><pre id="diag"></pre></div>

<script>
 async function act(cmd){ await fetch('/action?cmd=' + cmd); }
 async function refreshUI(){
   try {
     let s  = await fetch('/status'); let st = await s.json();
     let txt = 'bezel ' + st.bezel + 'px  virtual ' + st.virtual_width + 'x' + st.height
             + '  calibration ' + st.calibration + '\\n';
     for (let c of st.channels){
       txt += 'S' + (c.index + 1) + '  raw ' + c.raw + '  visible ' + (c.visible ? 1 : 0)
            + '  opacity ' + String(c.opacity).padStart(5,' ') + '  ' + c.pending + '\\n';
     }
     document.getElementById('status').textContent = txt;
     let d  = await fetch('/diag');    let dg = await d.json();
     txt = '';
     for (let [k,v] of Object.entries(dg)){
       txt += k.padEnd(20,' ') + v + '\\n';
     }
     document.getElementById('diag').textContent = txt;
   } catch(e){
     console.error(e);
   }
 }
 setInterval(refreshUI, 250);
 refreshUI();
</script>
</body></html>
"""


# ── server bootstrap with auto-restart ────────────────────────────────────
def start(wall: "FlowerWall", port: int = 8080) -> threading.Thread:
    def _serve_loop():
        while True:
            try:
                with ReusableTCPServer(("", port), RemoteHandler) as httpd:
                    httpd.wall = wall
                    httpd.serve_forever()
            except Exception:
                monitor_data["last_http_crash"] = traceback.format_exc()
                log.exception("web remote crashed – restarting")
                time.sleep(1)

    thread = threading.Thread(target=_serve_loop, daemon=True)
    thread.start()
    log.info("web UI & diagnostics listening on port %d", port)
    return thread
