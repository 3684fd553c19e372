"""
WSGI entry point for the sketch simulator

Point a WSGI server at wsgi:app; running this file starts the development server.
"""

from sketch_sim.app import app, socketio

if __name__ == "__main__":
    socketio.run(app)
