"""Flask + SocketIO live view for wifi-monitor."""

import logging
import threading
from typing import Any, Dict, Optional, Sequence

from .models import AccessPointRecord

LOG = logging.getLogger(__name__)

_HAS_FLASK = False
try:
    from flask import Flask
    from flask_socketio import SocketIO
    _HAS_FLASK = True
except ImportError:
    pass

_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>wifi-monitor</title>
<style>
*{box-sizing:border-box;margin:0;padding:0}
body{background:#0a0a0a;color:#00ff41;font-family:'Courier New',monospace;font-size:13px;height:100vh;display:flex;flex-direction:column}
#header{background:#111;border-bottom:1px solid #00ff4133;padding:8px 16px;display:flex;gap:24px}
#header h1{font-size:15px;letter-spacing:2px}
.stat{color:#aaa;font-size:12px}
.stat span{color:#00ff41;font-weight:bold}
#main{display:flex;flex:1;overflow:hidden}
#list{width:340px;overflow-y:auto;border-right:1px solid #00ff4133}
.ap{padding:6px 12px;border-bottom:1px solid #111;border-left:3px solid #00aaff}
.ap .ssid{color:#fff}
.ap .meta{font-size:11px;color:#666;margin-top:2px}
#radar-wrap{flex:1;display:flex;align-items:center;justify-content:center;background:#050505}
</style>
</head>
<body>
<div id="header">
  <h1>wifi-monitor</h1>
  <div class="stat">Interface: <span id="s-if">-</span></div>
  <div class="stat">APs: <span id="s-aps">0</span></div>
  <div class="stat">Scans: <span id="s-scans">0</span></div>
  <div class="stat">Failures: <span id="s-fail">0</span></div>
</div>
<div id="main">
  <div id="list"></div>
  <div id="radar-wrap"><canvas id="radar"></canvas></div>
</div>
<script src="https://cdn.socket.io/4.6.1/socket.io.min.js"></script>
<script>
const socket = io();
let aps = [];
const canvas = document.getElementById('radar');
const ctx = canvas.getContext('2d');

function resize(){
  const wrap = document.getElementById('radar-wrap');
  const sz = Math.min(wrap.clientWidth, wrap.clientHeight) - 20;
  canvas.width = sz; canvas.height = sz; draw();
}

function draw(){
  const sz = canvas.width, c = sz/2, r = sz/2 - 10;
  ctx.clearRect(0, 0, sz, sz);
  ctx.strokeStyle = '#0a2a0a';
  for(let i=1;i<=4;i++){ctx.beginPath();ctx.arc(c,c,r*i/4,0,Math.PI*2);ctx.stroke();}
  // Rings are logarithmic: 1, 10, 100, 1000 m
  aps.forEach((ap, i) => {
    const d = (ap.distance && ap.distance.estimated_meters) || 1000;
    const norm = Math.max(0, Math.min(1, Math.log10(Math.max(d, 1)) / 4));
    const a = (i / Math.max(aps.length, 1)) * Math.PI * 2;
    const x = c + r*norm*Math.cos(a), y = c + r*norm*Math.sin(a);
    ctx.beginPath(); ctx.arc(x, y, 3, 0, Math.PI*2);
    ctx.fillStyle = ap.security ? '#00aaff' : '#ff9900'; ctx.fill();
    ctx.fillStyle = '#00ff4188'; ctx.font = '9px monospace';
    ctx.fillText((ap.ssid || '(hidden)').substring(0, 12), x + 5, y - 3);
  });
}

function esc(s){
  return String(s).replace(/[&<>"']/g, c => ({'&':'&amp;','<':'&lt;','>':'&gt;','"':'&quot;',"'":'&#39;'})[c]);
}

function render(){
  const sorted = aps.slice().sort((a,b)=>(b.signal_dbm||-999)-(a.signal_dbm||-999));
  document.getElementById('list').innerHTML = sorted.map(ap => {
    const dist = ap.distance && ap.distance.estimated_meters != null ? '~' + ap.distance.estimated_meters.toFixed(1) + ' m ('
      + ap.distance.min_meters.toFixed(1) + '-' + ap.distance.max_meters.toFixed(1) + ')' : '';
    return `<div class="ap"><div class="ssid">${esc(ap.ssid || '(hidden)')}</div>
      <div class="meta">${esc(ap.bssid)} &nbsp; ${esc(ap.signal_dbm ?? '')} dBm &nbsp; ch ${esc(ap.channel ?? '?')}</div>
      <div class="meta">${esc(ap.security || 'OPEN')} &nbsp; ${esc(dist)}</div></div>`;
  }).join('');
  draw();
}

socket.on('scan', data => {
  aps = data.access_points || [];
  document.getElementById('s-if').textContent = data.interface;
  document.getElementById('s-aps').textContent = aps.length;
  render();
});
socket.on('status', data => {
  document.getElementById('s-scans').textContent = data.scan_count || 0;
  document.getElementById('s-fail').textContent = data.failure_count || 0;
});
window.addEventListener('resize', resize);
resize();
</script>
</body>
</html>
"""


class GuiServer:
    """Flask + SocketIO web view pushed after every successful scan."""

    def __init__(self, port: int = 5000, open_browser: bool = True):
        self._port = port
        self._open_browser = open_browser
        self._thread: Optional[threading.Thread] = None
        self._sio: Optional["SocketIO"] = None
        self._app: Optional["Flask"] = None

    @property
    def available(self) -> bool:
        return _HAS_FLASK

    def start(self) -> bool:
        if not _HAS_FLASK:
            return False
        self._app = Flask(__name__)
        self._app.config["SECRET_KEY"] = "wifi-monitor"
        self._sio = SocketIO(self._app, cors_allowed_origins="*",
                             async_mode="threading", logger=False,
                             engineio_logger=False)

        @self._app.route("/")
        def index():
            from flask import Response
            return Response(_HTML, mimetype="text/html")

        self._thread = threading.Thread(
            target=self._sio.run,
            kwargs={"app": self._app, "port": self._port,
                    "host": "127.0.0.1", "allow_unsafe_werkzeug": True},
            daemon=True,
        )
        self._thread.start()

        if self._open_browser:
            import webbrowser
            webbrowser.open(f"http://localhost:{self._port}")
        return True

    @staticmethod
    def scan_payload(interface: str,
                     records: Sequence[AccessPointRecord]) -> Dict[str, Any]:
        return {
            "interface": interface,
            "total_aps": len(records),
            "access_points": [rec.to_dict() for rec in records],
        }

    def emit_scan(self, interface: str, records: Sequence[AccessPointRecord]):
        if self._sio is None:
            return
        self._sio.emit("scan", self.scan_payload(interface, records))

    def emit_status(self, data: Dict[str, Any]):
        if self._sio is None:
            return
        self._sio.emit("status", data)

    def stop(self):
        if self._sio is None:
            return
        try:
            self._sio.stop()
        except RuntimeError as e:
            # Raised outside a request context; the daemon thread exits
            # with the process.
            LOG.debug("Web view stop skipped: %s", e)
        self._sio = None
