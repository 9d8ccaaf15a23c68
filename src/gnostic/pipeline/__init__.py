"""Run orchestration: decoding, sink emission, plugin calls and failure tracking."""
