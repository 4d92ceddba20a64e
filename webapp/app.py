"""
Flask web application for the animation sketchpad.

The browser owns the canvas pixels; it uploads PNG data URLs for captures
and frames, and receives frames to show through Socket.IO.
"""
import io
from typing import Callable, Optional

from flask import Flask, jsonify, request, send_file
from flask_cors import CORS
from flask_socketio import SocketIO, emit
from pydantic import BaseModel, Field, ValidationError
from werkzeug.exceptions import HTTPException

from config import ARCHIVE_FILENAME, MAX_INTERVAL_MS, MIN_INTERVAL_MS, WEB_HOST, WEB_PORT, WEB_DEBUG
from session import AnimationSession
from state.errors import (
    SketchpadError,
    CapacityExceeded,
    CorruptArchive,
    EmptyArchive,
    IndexOutOfRange,
)
from state.snapshot import Snapshot
from surface.browser_surface import BrowserSurface
from utils.logger import get_logger

logger = get_logger(__name__)

app = Flask(__name__)
CORS(app)
socketio = SocketIO(app, cors_allowed_origins="*")

ERROR_STATUS = {
    CapacityExceeded: 409,
    IndexOutOfRange: 404,
    CorruptArchive: 422,
    EmptyArchive: 422,
}


class CapturePayload(BaseModel):
    """Canvas upload."""
    image: str = Field(description="Canvas contents as a base64 image data URL")


class FramePayload(BaseModel):
    """Frame upload; without an image the last captured canvas is used."""
    image: Optional[str] = Field(default=None, description="Canvas contents as a base64 image data URL")


class PlaybackPayload(BaseModel):
    interval_ms: Optional[int] = Field(
        default=None, ge=MIN_INTERVAL_MS, le=MAX_INTERVAL_MS, description="Milliseconds between frames"
    )


def initialize_session(spawn: Optional[Callable] = None, **session_kwargs) -> AnimationSession:
    """
    Create the sketchpad session behind the API.

    Args:
        spawn: Background task runner for playback (default: Socket.IO background task)
        session_kwargs: Extra AnimationSession arguments (capacities, archive)
    """
    logger.info("Initializing sketchpad session...")
    surface = BrowserSurface(emit=lambda event, payload: socketio.emit(event, payload))
    session = AnimationSession(
        surface,
        spawn=spawn or socketio.start_background_task,
        on_playback_change=_emit_playback_state,
        **session_kwargs
    )
    app.extensions["sketchpad"] = session
    logger.info("Sketchpad session initialized")
    return session


def get_session() -> AnimationSession:
    session = app.extensions.get("sketchpad")
    if session is None:
        session = initialize_session()
    return session


def _emit_playback_state(is_playing: bool) -> None:
    socketio.emit('playback_changed', {'is_playing': is_playing})


def _parse(model):
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    return model.model_validate(data)


class _BadImage(Exception):
    pass


def _snapshot_from(image: str) -> Snapshot:
    try:
        return Snapshot.from_data_url(image)
    except ValueError as e:
        raise _BadImage(str(e)) from e


@app.errorhandler(SketchpadError)
def handle_sketchpad_error(e: SketchpadError):
    logger.warning(f"Rejected ({e.code}): {e.message}")
    return jsonify(e.to_dict()), ERROR_STATUS.get(type(e), 400)


@app.errorhandler(ValidationError)
def handle_validation_error(e: ValidationError):
    messages = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
    return jsonify({"error": "Invalid request body", "details": messages}), 400


@app.errorhandler(_BadImage)
def handle_bad_image(e: _BadImage):
    return jsonify({"error": f"Invalid image: {e}", "code": "invalid_image"}), 400


@app.errorhandler(Exception)
def handle_unexpected(e: Exception):
    if isinstance(e, HTTPException):
        return e
    logger.error(f"Unhandled error: {e}", exc_info=True)
    return jsonify({"error": str(e)}), 500


@app.route('/api/status', methods=['GET'])
def get_status():
    """Get history, frame and playback state."""
    return jsonify({"status": "ready", **get_session().status()})


@app.route('/api/capture', methods=['POST'])
def capture():
    """Record the uploaded canvas as a new history state."""
    payload = _parse(CapturePayload)
    session = get_session()
    with session.lock:
        session.surface.stage(_snapshot_from(payload.image))
        session.on_capture()
        history = session.history.to_dict()
    socketio.emit('history_changed', history)
    return jsonify({"success": True, "history": history})


@app.route('/api/undo', methods=['POST'])
def undo():
    session = get_session()
    snapshot = session.undo()
    history = session.history.to_dict()
    socketio.emit('history_changed', history)
    return jsonify({"success": True, "image": snapshot.to_data_url(), "history": history})


@app.route('/api/redo', methods=['POST'])
def redo():
    session = get_session()
    snapshot = session.redo()
    history = session.history.to_dict()
    socketio.emit('history_changed', history)
    return jsonify({"success": True, "image": snapshot.to_data_url(), "history": history})


@app.route('/api/clear', methods=['POST'])
def clear_canvas():
    """Clear the canvas (recorded in history)."""
    session = get_session()
    snapshot = session.clear_canvas()
    socketio.emit('render_frame', {'image': snapshot.to_data_url()})
    return jsonify({"success": True, "message": "Canvas cleared", "history": session.history.to_dict()})


@app.route('/api/history/clear', methods=['POST'])
def clear_history():
    session = get_session()
    session.clear_history()
    history = session.history.to_dict()
    socketio.emit('history_changed', history)
    return jsonify({"success": True, "message": "History cleared", "history": history})


@app.route('/api/frames', methods=['POST'])
def add_frame():
    """Add the canvas as an animation frame."""
    payload = _parse(FramePayload)
    session = get_session()
    with session.lock:
        if payload.image:
            session.surface.stage(_snapshot_from(payload.image))
        count = session.add_frame()
    socketio.emit('frames_changed', {'count': count})
    return jsonify({"success": True, "message": f"Frame {count} added.", "count": count})


@app.route('/api/frames', methods=['DELETE'])
def clear_frames():
    session = get_session()
    session.clear_frames()
    socketio.emit('frames_changed', {'count': 0})
    return jsonify({"success": True, "message": "Frames cleared", "count": 0})


@app.route('/api/frames/<int:index>', methods=['GET'])
def get_frame(index: int):
    snapshot = get_session().get_frame(index)
    return jsonify({
        "index": index,
        "image": snapshot.to_data_url(),
        "width": snapshot.width,
        "height": snapshot.height
    })


@app.route('/api/playback/start', methods=['POST'])
def start_playback():
    payload = _parse(PlaybackPayload)
    session = get_session()
    session.start_playback(payload.interval_ms)
    return jsonify({"success": True, "playback": session.playback.to_dict()})


@app.route('/api/playback/stop', methods=['POST'])
def stop_playback():
    session = get_session()
    session.stop_playback()
    return jsonify({"success": True, "playback": session.playback.to_dict()})


@app.route('/api/playback/toggle', methods=['POST'])
def toggle_playback():
    payload = _parse(PlaybackPayload)
    session = get_session()
    session.toggle_playback(payload.interval_ms)
    return jsonify({"success": True, "playback": session.playback.to_dict()})


@app.route('/api/frames/export', methods=['GET'])
def export_frames():
    """Download all frames as a zip archive."""
    data = get_session().export_frames()
    return send_file(
        io.BytesIO(data),
        mimetype="application/zip",
        as_attachment=True,
        download_name=ARCHIVE_FILENAME
    )


@app.route('/api/frames/import', methods=['POST'])
def import_frames():
    """Replace frames from an uploaded zip (multipart 'file' or raw body)."""
    upload = request.files.get('file')
    data = upload.read() if upload is not None else request.get_data()
    if not data:
        return jsonify({"error": "No archive provided"}), 400

    count = get_session().import_frames(data)
    socketio.emit('frames_changed', {'count': count})
    return jsonify({"success": True, "message": f"{count} frames imported.", "count": count})


@socketio.on('connect')
def handle_connect():
    """Handle client connection."""
    logger.info("Client connected")
    emit('connected', {'message': 'Connected to sketchpad'})


@socketio.on('disconnect')
def handle_disconnect(reason=None):
    """Handle client disconnection."""
    logger.info("Client disconnected")


if __name__ == '__main__':
    initialize_session()
    logger.info(f"Starting Flask web server on http://localhost:{WEB_PORT}")
    socketio.run(app, host=WEB_HOST, port=WEB_PORT, debug=WEB_DEBUG, allow_unsafe_werkzeug=True)
