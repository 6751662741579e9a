"""
Per-sample genotype statistics over VCF/BCF files.

Counts genotype categories (Het, HomRef, NoCall, ...) per sample, optionally
restricted to genomic regions, with mergeable results for sharded runs.
"""

__version__ = "1.0.0"
__author__ = "Data Tecnica International"
