"""
Tapwork Test Suite

Unit tests for descriptors, integrity checks, fetching and extraction,
plus pipeline and CLI tests that install fake binaries into temp directories.
"""
