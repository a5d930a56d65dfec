"""Gateway implementations."""
