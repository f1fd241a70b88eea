"""
Workers module.

Out-of-process entry points for document processing. They share the
DocumentProcessor used by the in-process queue, so a document processed
here goes through the same state transitions and failure recording.
"""
