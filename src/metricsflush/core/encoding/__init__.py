"""Wire encodings for records."""
