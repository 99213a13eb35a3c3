"""
Smart scheduling feature package.

Keeps the mutual availability engine (pure, synchronous), its repository,
the async orchestration service and the API router co-located. The engine
subpackage has no I/O and never reads settings; everything it needs is
passed in by the service layer.
"""
