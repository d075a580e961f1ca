"""gomaker — Makefile generator for Go projects.

Inspects a Go main package and writes a Makefile whose build rule is
assembled from named options (static linking, stripped symbols, verbose
build, commit/version stamping) plus custom tags, ldflags and ``-X``
variable substitutions.
"""

__version__ = "0.1.0"
