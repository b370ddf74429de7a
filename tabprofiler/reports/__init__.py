"""Package for drawing and saving the profiling charts."""
