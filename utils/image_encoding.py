import io

from fastapi.responses import Response
from PIL import Image


def png_bytes(image: Image.Image) -> bytes:
    """Encode an image as PNG bytes."""
    out_io = io.BytesIO()
    image.save(out_io, format="PNG")
    return out_io.getvalue()


def png_response(image: Image.Image) -> Response:
    return Response(content=png_bytes(image), media_type="image/png")
