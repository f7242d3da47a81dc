"""
Encode a cabin photo as a self-contained data URI for Cabin.image.
"""

import base64
import mimetypes
from pathlib import Path


def encode_image(path: str | Path) -> str:
    """Read an image file and return "data:<mime>;base64,<payload>"."""
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime or 'application/octet-stream'};base64,{payload}"
