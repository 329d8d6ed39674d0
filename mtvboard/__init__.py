"""Transport-stream buffering, HLS segmenting, board I/O and cascade links for a multiviewer board."""

__version__ = "0.1.0"