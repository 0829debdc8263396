import logging
import os

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from deepfake_backend import config, describe, reality_defender, sightengine
from deepfake_backend.errors import ConfigurationError, DetectionError, MediaError
from deepfake_backend.media import decode_media

logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)

app = Flask(__name__)
# base64 inflates the 10MB image limit by a third
app.config["MAX_CONTENT_LENGTH"] = 16 * 1024 * 1024
CORS(app)


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------
def read_media():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise MediaError("No image provided")
    media = data.get("media")
    if not media:
        raise MediaError("No image provided")
    return decode_media(media)


def error_response(e):
    if isinstance(e, HTTPException):
        return jsonify({"error": e.description}), e.code
    if isinstance(e, DetectionError):
        return jsonify({"error": str(e)}), e.status_code
    return jsonify({"error": str(e) or "Image analysis failed"}), 500


# -----------------------------------------------------------------------------
# ROUTES
# -----------------------------------------------------------------------------
@app.route("/")
def index():
    return INDEX_HTML


@app.route("/health")
def health_check():
    return jsonify({"status": "ok"})


@app.route("/api/detect", methods=["POST"])
def detect():
    """Reality Defender verdict for the posted image."""
    try:
        image = read_media()
        api_key = config.reality_defender_key()
        if not api_key:
            raise ConfigurationError("API credentials not configured")

        result = reality_defender.detect(image, api_key)
        return jsonify(reality_defender.normalize(result))
    except (MediaError, HTTPException) as e:
        log.warning("Rejected upload: %s", e)
        return error_response(e)
    except Exception as e:
        log.exception("❌ Deepfake detection error: %s", e)
        return error_response(e)


@app.route("/api/verify", methods=["POST"])
def verify():
    """Sightengine verdict for the posted image."""
    try:
        image = read_media()
        api_user, api_secret = config.sightengine_credentials()
        log.info(
            "API_USER configured: %s, API_SECRET configured: %s",
            bool(api_user),
            bool(api_secret),
        )
        if not api_user or not api_secret:
            raise ConfigurationError("API credentials not configured")

        result = sightengine.check(image, api_user, api_secret)
        return jsonify(sightengine.normalize(result))
    except (MediaError, HTTPException) as e:
        log.warning("Rejected upload: %s", e)
        return error_response(e)
    except Exception as e:
        log.exception("❌ Detection error: %s", e)
        return error_response(e)


@app.route("/api/describe", methods=["POST"])
def describe_route():
    try:
        image = read_media()
        api_key = config.gemini_key()
        if not api_key:
            raise ConfigurationError("API credentials not configured")

        return jsonify({"description": describe.describe_image(image, api_key)})
    except (MediaError, HTTPException) as e:
        log.warning("Rejected upload: %s", e)
        return error_response(e)
    except Exception as e:
        log.exception("❌ Description error: %s", e)
        return error_response(e)


INDEX_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Deepfake Check</title>
    <style>
      body { margin: 0; font-family: ui-sans-serif, system-ui, Segoe UI, Roboto, Arial; background:#0b1020; color:#e7e7e7; }
      main { max-width: 720px; margin: 0 auto; padding: 24px; }
      .card { background:#0f1730; border:1px solid #1f2a44; border-radius:14px; padding:16px; margin-top:16px; }
      button { padding:10px 14px; border-radius:12px; border:1px solid #2a3a66; background:#1b2a55; color:#fff; cursor:pointer; font-weight:600; }
      button:disabled { opacity:0.55; cursor:not-allowed; }
      select { padding:8px; border-radius:10px; background:#0b1124; color:#fff; border:1px solid #243153; }
      img { max-width:100%; border-radius:10px; }
      table { width:100%; border-collapse:collapse; font-size:14px; }
      td, th { text-align:left; padding:6px; border-bottom:1px solid #1f2a44; }
      .fake { color:#ff6b6b; } .real { color:#5ee37a; }
      .muted { color:#9aa7d0; font-size:12px; }
    </style>
  </head>
  <body>
    <main>
      <h1>Deepfake Check</h1>
      <div class="card">
        <input id="file" type="file" accept="image/*" />
        <select id="provider">
          <option value="/api/verify">Sightengine</option>
          <option value="/api/detect">Reality Defender</option>
        </select>
        <button id="run" disabled>Analyze</button>
        <div id="status" class="muted" style="margin-top:10px;"></div>
        <div id="preview" style="margin-top:10px;"></div>
      </div>
      <div class="card" id="result" hidden></div>
    </main>
    <script>
      const ALLOWED = ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"];
      const MAX_BYTES = 10 * 1024 * 1024;
      let dataUri = null;

      const status = document.getElementById("status");
      const run = document.getElementById("run");
      const result = document.getElementById("result");

      function escapeHtml(str) {
        return String(str).replaceAll("&","&amp;").replaceAll("<","&lt;").replaceAll(">","&gt;");
      }

      document.getElementById("file").addEventListener("change", (e) => {
        const file = e.target.files?.[0];
        dataUri = null; run.disabled = true; result.hidden = true;
        if (!file) return;
        if (!ALLOWED.includes(file.type)) { status.textContent = "Please select a valid image file (JPG, PNG, GIF, or WebP)"; return; }
        if (file.size > MAX_BYTES) { status.textContent = "Maximum file size is 10MB. Please select a smaller image."; return; }
        const reader = new FileReader();
        reader.onloadend = () => {
          dataUri = reader.result;
          document.getElementById("preview").innerHTML = `<img src="${dataUri}" alt="Selected image preview" />`;
          status.textContent = ""; run.disabled = false;
        };
        reader.readAsDataURL(file);
      });

      run.addEventListener("click", async () => {
        if (!dataUri) return;
        run.disabled = true; status.textContent = "Analyzing…"; result.hidden = true;
        try {
          const resp = await fetch(document.getElementById("provider").value, {
            method: "POST",
            headers: { "Content-Type": "application/json" },
            body: JSON.stringify({ media: dataUri }),
          });
          const body = await resp.json();
          if (!resp.ok || body.error) throw new Error(body.error || `API request failed: ${resp.status}`);
          const o = body.overall;
          const cls = o.verdict.toUpperCase() === "FAKE" ? "fake" : "real";
          const rows = (body.details || []).map(d =>
            `<tr><td>${escapeHtml(d.name)}</td><td>${escapeHtml(d.status)}</td><td>${(Number(d.confidence) * 100).toFixed(1)}%</td></tr>`).join("");
          result.innerHTML = `
            <h2 class="${cls}">${escapeHtml(o.verdict.toUpperCase())}</h2>
            <div>${escapeHtml(o.classification)} · confidence ${(Number(o.confidence) * 100).toFixed(1)}%</div>
            ${body.summary ? `<p class="muted">${body.summary.manipulatedCount} of ${body.summary.totalModels} models flagged MANIPULATED</p>` : ""}
            ${rows ? `<table><tr><th>Model</th><th>Status</th><th>Confidence</th></tr>${rows}</table>` : ""}`;
          result.hidden = false;
          status.textContent = "Done.";
        } catch (err) {
          status.textContent = `Analysis Failed: ${err.message}`;
        } finally {
          run.disabled = false;
        }
      });
    </script>
  </body>
</html>
"""


if __name__ == "__main__":
    port = int(os.environ.get("PORT", "5000"))
    print(f"🟢 Server starting on Port {port}...", flush=True)
    app.run(debug=os.environ.get("FLASK_DEBUG") == "1", port=port)
