"""Screenshot Gateway: signed screenshot requests served cache-aside."""
