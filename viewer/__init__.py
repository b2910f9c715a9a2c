"""Viewer package: remote-service client, state reconcilers and app loop."""
