from __future__ import annotations

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from bytelab.utils import config
from bytelab.utils.exceptions import HistogramError
from inspector.app.analysis_adapter import bytes_to_delta, bytes_to_histogram

load_dotenv()


def _int_arg(name: str) -> int | None:
    val = request.args.get(name, "").strip()
    return int(val) if val else None


def create_app() -> Flask:
    app = Flask(__name__)
    app.config["counter"] = config.DEFAULT_COUNTER
    app.config["accuracy"] = config.DEFAULT_ACCURACY

    def _body() -> bytes | None:
        # Expect raw bytes
        if request.headers.get("Content-Type", "") != "application/octet-stream":
            return None
        return request.data or b""

    @app.post("/histogram")
    def histogram():
        bytez = _body()
        if bytez is None:
            return jsonify({"error": "expecting application/octet-stream"}), 400
        try:
            result = bytes_to_histogram(
                bytez,
                start=_int_arg("start"),
                end=_int_arg("end"),
                counter=request.args.get("counter") or app.config["counter"],
            )
        except (HistogramError, ValueError) as e:
            app.logger.warning("request rejected: %s", e)
            return jsonify({"error": str(e)}), 400
        return jsonify(result), 200

    @app.post("/delta")
    def delta():
        bytez = _body()
        if bytez is None:
            return jsonify({"error": "expecting application/octet-stream"}), 400
        try:
            accuracy = _int_arg("accuracy")
            result = bytes_to_delta(
                bytez,
                accuracy=app.config["accuracy"] if accuracy is None else accuracy,
                start=_int_arg("start"),
                end=_int_arg("end"),
                counter=request.args.get("counter") or app.config["counter"],
            )
        except (HistogramError, ValueError) as e:
            app.logger.warning("request rejected: %s", e)
            return jsonify({"error": str(e)}), 400
        return jsonify(result), 200

    @app.get("/info")
    def info():
        return jsonify(
            {
                "runtime": "bytelab-histogram",
                "counter": app.config["counter"],
                "accuracy": app.config["accuracy"],
                "buckets": 256,
            }
        ), 200

    return app


app = create_app()

if __name__ == "__main__":
    # Dev server
    app.run(host="0.0.0.0", port=8080, debug=True)
