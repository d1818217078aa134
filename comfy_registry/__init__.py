"""Static registry of ComfyUI checkpoints and system components.

Read-only tables plus lookup helpers consumed by image generation pipelines:
- ``registry.components``: VAE / CLIP / T5 components, priority selection
- ``registry.models``: main checkpoints grouped by family and variant
- ``registry.resolver``: model id / file name resolution
- ``config``: layered YAML + env configuration
"""

__version__ = "0.1.0"
