"""Generate doxygen documentation for conan packages and their dependencies."""

__version__ = "0.1.0"
