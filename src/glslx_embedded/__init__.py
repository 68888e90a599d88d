"""Language support for GLSLX shaders embedded in host-language string literals."""

__version__ = "0.1.0"
