"""
Serving — FastAPI application hosting the node outside a workflow engine.

The app plays the host's role: it builds an execution context from the
request, connects the default embedding model, and returns the node's
output records.
"""
