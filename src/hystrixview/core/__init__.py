"""Core domain: snapshot access, classification, aggregation and ordering."""
