"""Web API for the sketchpad."""
