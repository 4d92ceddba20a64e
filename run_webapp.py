"""
Run the web application.
"""
import sys
import os

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import WEB_HOST, WEB_PORT, WEB_DEBUG
from webapp.app import app, socketio, initialize_session

if __name__ == '__main__':
    try:
        initialize_session()
    except Exception as e:
        print(f"ERROR: Failed to initialize sketchpad session: {e}. Exiting.")
        sys.exit(1)

    # Run Flask app
    print("=" * 70)
    print("Animation Sketchpad - Web API")
    print("=" * 70)
    print(f"Starting server on http://localhost:{WEB_PORT}")
    print("=" * 70)

    socketio.run(app, host=WEB_HOST, port=WEB_PORT, debug=WEB_DEBUG, allow_unsafe_werkzeug=True)
