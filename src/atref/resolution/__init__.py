"""Reference path resolution."""
