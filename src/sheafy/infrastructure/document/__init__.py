"""Bundle document format"""

from sheafy.infrastructure.document.decoder import DocumentDecoder
from sheafy.infrastructure.document.encoder import DocumentEncoder, choose_fence

__all__ = ["DocumentDecoder", "DocumentEncoder", "choose_fence"]
