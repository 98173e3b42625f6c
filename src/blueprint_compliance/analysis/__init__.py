"""Lexical source heuristics and the intra-project import graph."""
