"""Core domain: snapshot shape, records, translation and filtering."""
