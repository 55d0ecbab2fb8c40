"""I/O layer: level and playback documents, corpus paths, and run-log schemas."""
